"""Read, write, patch and extract DW_PACK archives with block-wise Huffman compression."""

__version__ = "0.1.0"