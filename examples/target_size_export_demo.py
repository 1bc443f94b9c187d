"""
Target file size export demonstration.

Loads an image (or a generated test photo), applies a few edits, then exports
it to several target sizes and writes each download next to the source.
Shows how many encodes the quality search needed and whether the target was met.

Usage:
    python examples/target_size_export_demo.py [image_path] [output_dir]
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging
import mimetypes
from io import BytesIO

import numpy as np
from PIL import Image

from IC_Libs.SessionLib import EditSession, ImageSurface


def generated_photo_bytes(width=800, height=600):
    """PNG bytes of a gradient-and-noise image that compresses like a photo."""
    rng = np.random.RandomState(0)
    xs = np.linspace(0, 255, width, dtype=np.float32)
    ys = np.linspace(0, 255, height, dtype=np.float32)
    rgb = np.stack(
        [np.tile(xs, (height, 1)), np.tile(ys[:, np.newaxis], (1, width)), np.full((height, width), 128.0)],
        axis=-1,
    )
    rgb = np.clip(rgb + rng.normal(0, 20, size=rgb.shape), 0, 255).astype(np.uint8)
    buffer = BytesIO()
    Image.fromarray(rgb).save(buffer, format="PNG")
    return buffer.getvalue()


def load_source(path):
    if path is None:
        return generated_photo_bytes(), "image/png", "generated.png"
    source = Path(path)
    mime_type = mimetypes.guess_type(source.name)[0] or "application/octet-stream"
    return source.read_bytes(), mime_type, source.name


def main():
    """Run the export demonstration."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    image_path = sys.argv[1] if len(sys.argv) > 1 else None
    output_dir = Path(sys.argv[2]) if len(sys.argv) > 2 else Path.cwd()
    output_dir.mkdir(parents=True, exist_ok=True)

    print("=" * 60)
    print("Target Size Export Demonstration")
    print("=" * 60)

    file_bytes, mime_type, file_name = load_source(image_path)

    with EditSession(surface=ImageSurface()) as session:
        session.load_image(file_bytes, mime_type, file_name).raise_for_status()
        session.update_filter("contrast", 60).raise_for_status()
        session.update_filter("saturation", 65).raise_for_status()
        session.apply_social_media_preset("Instagram Post").raise_for_status()
        print(f"\nEdited image: {session.document.width}x{session.document.height}")

        test_cases = [
            ("jpeg", 50, "KB"),
            ("jpeg", 200, "KB"),
            ("webp", 80, "KB"),
            ("jpeg", 1, "KB"),
        ]

        print("\nFormat  Target     Actual       Quality  Attempts  Met")
        print("-" * 60)
        for export_format, size, unit in test_cases:
            session.update_export_settings(
                format=export_format, target_file_size=size, file_size_unit=unit
            ).raise_for_status()

            result = session.download_image()
            if result.failed:
                print(f"\n⚠ Error: {result.message}")
                continue

            export = session.apply_export_settings().value
            blob = result.value
            out_path = output_dir / f"{size}{unit.lower()}-{blob.file_name}"
            out_path.write_bytes(blob.data)

            met = "yes" if not result.has_warning else "no"
            print(f"{export_format:6s}  {size:4d}{unit:3s}    {blob.size_bytes:8d} B   "
                  f"{export.quality:5d}    {export.attempts:5d}     {met}")

    print("\n" + "=" * 60)
    print(f"Files written to {output_dir}")


if __name__ == "__main__":
    main()
