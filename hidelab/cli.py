"""
Command-line interface: hide messages in images and read them back
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from hidelab.services.steganography.core.errors import StegoError
from hidelab.services.steganography.core.raw import format_data_preview
from hidelab.services.steganography.core.service import ImageStegoService
from hidelab.services.steganography.models.stego_models import StegoOptions
from hidelab.services.steganography.utils.image_utils import load_image_from_bytes, save_lossless
from hidelab.services.steganography.utils.validation import parse_seed
from hidelab.utility.constants_manager import ConstantsManager

SUFFIX_FORMATS = {".png": "png", ".bmp": "bmp", ".tif": "tiff", ".tiff": "tiff"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hidelab", description="Hide messages in images using BLTM steganography")
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="Hide a message in an image")
    enc.add_argument("-i", "--image", required=True, type=Path, help="Path to the cover image file")
    source = enc.add_mutually_exclusive_group(required=True)
    source.add_argument("-m", "--message", help="The message to hide")
    source.add_argument("-f", "--file", type=Path, help="Read the message from a file")
    enc.add_argument("-o", "--output", required=True, type=Path, help="Path of the stego image (.png, .bmp, .tiff)")
    enc.add_argument("--seed", help="Matrix seed (decimal or 0x hex)")

    dec = sub.add_parser("decode", help="Extract a hidden message from an image")
    dec.add_argument("-i", "--image", required=True, type=Path, help="Path to the stego image file")
    dec.add_argument("--hex", action="store_true", help="Display output as hexadecimal")
    dec.add_argument("--raw", action="store_true", help="Extract raw data without header validation")
    dec.add_argument("-o", "--output", type=Path, help="Save output to file instead of displaying")
    dec.add_argument("--seed", help="Matrix seed used when encoding")

    cap = sub.add_parser("capacity", help="Show how many bytes an image can hide")
    cap.add_argument("-i", "--image", required=True, type=Path, help="Path to the image file")
    return parser


def hex_dump(data: bytes, width: int = 16) -> str:
    rows = []
    for start in range(0, len(data), width):
        rows.append(" ".join(f"{b:02x}" for b in data[start:start + width]))
    return "\n".join(rows)


def _service() -> ImageStegoService:
    # Default seed comes from HIDE_SEED, as for the HTTP service
    return ImageStegoService(ConstantsManager().get_seed())


def _load(path: Path):
    return load_image_from_bytes(path.read_bytes())


def cmd_encode(args: argparse.Namespace) -> int:
    payload = args.file.read_bytes() if args.file else args.message.encode("utf-8")
    fmt = SUFFIX_FORMATS.get(args.output.suffix.lower())
    if fmt is None:
        print(f"Error: output must be a lossless image (.png, .bmp, .tiff), got {args.output.name}", file=sys.stderr)
        return 1

    print(f"Message size: {len(payload)} bytes")
    print(f"Encoding message into image: {args.image}")
    service = _service()
    stego_img, result = service.hide(_load(args.image), payload, StegoOptions(seed=parse_seed(args.seed), output_format=fmt))
    save_lossless(stego_img, args.output, fmt)

    print(f"Message successfully hidden in: {args.output}")
    if result.psnr is not None:
        print(f"LSBs flipped: {result.flipped_bits}, PSNR: {result.psnr:.2f} dB")
    return 0


def cmd_decode(args: argparse.Namespace) -> int:
    print(f"Extracting hidden message from: {args.image}")
    service = _service()
    seed = parse_seed(args.seed)
    if args.raw:
        print("Using raw extraction mode (ignoring header format)")
        result = service.reveal_raw(_load(args.image), seed)
    else:
        result = service.reveal(_load(args.image), seed)

    print(f"Message size: {result.message_length} bytes")
    if args.output:
        args.output.write_bytes(result.payload)
        print(f"Output written to: {args.output}")
        if args.raw:
            print(f"\n{format_data_preview(result.payload, 32)}")
        return 0

    if args.raw:
        print(f"\n{format_data_preview(result.payload, 32)}")
    elif result.text is not None and not args.hex:
        print("\n----- DECODED MESSAGE -----")
        print(result.text)
        print("-------------------------\n")
    else:
        print("\n----- BINARY MESSAGE (hex) -----")
        if result.payload:
            print(hex_dump(result.payload))
        print("--------------------------------\n")
    return 0


def cmd_capacity(args: argparse.Namespace) -> int:
    info = _service().capacity(_load(args.image))
    print(f"Image: {info.width}x{info.height}, {info.channels} channels")
    print(f"Carrier groups: {info.carrier_groups} of {info.group_size} bits")
    print(f"Capacity: {info.capacity_bytes} bytes (header {info.header_bytes} bytes)")
    return 0


COMMANDS = {
    "encode": cmd_encode,
    "decode": cmd_decode,
    "capacity": cmd_capacity,
}


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.WARNING)
    args = build_parser().parse_args(argv)
    try:
        return COMMANDS[args.command](args)
    except StegoError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
