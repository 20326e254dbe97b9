# pactools

pactools works with `DW_PACK` archives (`.pac` files). Each file in such an archive is stored as a
series of independently Huffman-coded blocks. With pactools you can build an archive from a directory,
replace files inside an existing archive, and extract an archive back to disk.

## Installation

```
pip install .
```

## Command line

Every command accepts several arguments and handles them one after another. If no argument is
given, the command prints a usage line and exits with status 1. Progress and status messages go to
the standard error stream through `logging`.

### Pack

```
pac-pack data
```

This packs every regular file below the directory `data` into `data.pac`. An existing `data.pac` is
first moved to `data.pac.bak`. If a backup already exists, it is left alone and `data.pac` is
overwritten. Arguments that are not directories are ignored. The command prints one progress line
per file, in the form `[n/total] ratio% - name`. At the end it prints the total size and the overall
compression ratio.

### Patch

```
pac-patch data
pac-patch data.pac
```

The argument may be the directory or the `.pac` file. Any extension is removed, and the directory
with that name must exist. On the first run, `data.pac` is moved to `data.pac.bak`. Every run reads
that backup, so patches always start from the unmodified archive. A file from `data/` replaces an
entry only when the archive already has an entry with the same path. Other files are reported and
skipped. The command writes the new `data.pac` and prints per-file progress and a summary, as
`pac-pack` does. If neither the archive nor its backup can be found, the command says so and moves
on to the next argument.

### Unpack

```
pac-unpack data.pac
```

This extracts every entry into a directory named after the archive (here `data/`) in the current
working directory. Backslashes in stored names become directory separators. The command prints the
path of each file it writes.

## Library

```python
from pactools.archive import PacArchive
from pactools.sources import SystemFileSource
from pactools.helper import read_entry, extract_archive

archive = PacArchive("data.pac")
for name in archive:                      # entry names in sorted order
    print(name, len(read_entry(archive, name)))

archive.insert("textures\\logo.png", SystemFileSource("logo.png"))
info = archive.save("data_new.pac", None)
print(info.compressed_size + info.header_size, "bytes")

extract_archive("data.pac", "out", ["textures\\logo.png"])
```

- `pactools.archive.PacArchive` maps virtual paths to file sources. It supports `len()`, iteration,
  `in`, `get`, `insert`, `remove` and `save(path, callback)`. `get` also tries the name with `/`
  replaced by `\`, and `insert` stores new names with backslash separators. `save` compresses every
  source that is not compressed yet, in blocks of 128 KiB. After each file it calls the callback with
  a `ProgressInfo`, and when done it returns an `ArchiveInfo`.
- `pactools.helper` provides `pack_archive`, `patch_archive`, `extract_archive` (with an optional
  list of exact entry names), `read_entry`, `make_relative` and `format_progress`.
- `pactools.sources` provides `SystemFileSource` for files on disk and `PacFileSource` for entries of
  an archive on disk.
- `pactools.structs` provides `PacHeader` and `DirectoryEntry`, which handle the binary layout.
  Malformed data raises `InvalidArchiveError`.
- `pactools.compressor` provides `prepare_compression`, `compress`, `prepare_decompression` and
  `decompress`, which work with the block container format. Blocks are processed on a thread pool,
  and malformed streams raise `CompressionError`.
- `pactools.huffman` provides `HuffmanTree`.
- `pactools.bitstream` provides `BitWriter` and `BitReader`, which write and read MSB-first bit
  streams.

## Limitations

- The command line has no way to list an archive's contents or to extract only some entries. Both
  are available from the library.
- `pac-unpack` always extracts into the current working directory. `extract_archive` accepts another
  target folder.
- Entry names are limited to 259 bytes when encoded as UTF-8.