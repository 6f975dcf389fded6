"""
Image Steganography Service - BLTM matrix encoding

A steganography service supporting:
- Hiding text or binary payloads in RGB/RGBA images
- Binary lower triangular matrix (BLTM) encoding, 3 message bits per 3 carrier LSBs
- Seeded, per-call matrix generation
- Self-describing header with magic tag and payload length
- Raw syndrome extraction for inspecting carriers
"""

__version__ = "0.1.0"
__author__ = "Image Lab Team"
