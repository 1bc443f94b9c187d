"""
IC_Libs - ImageCraft Lite Library Modules

This package contains the single-image editing engine of ImageCraft Lite,
organized into specialized sub-packages:

- ImageEditingLib: Decode, filters, transforms, resize, presets and export
- SessionLib: Undo/redo history, render pipeline, surfaces and the EditSession orchestrator
"""

__version__ = "0.1.0"
