"""
Pytest configuration for local imports and shared image fixtures.
"""

# Standard Library
import os
import pathlib
import sys

# PIP3 modules
import PIL.Image
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()


#============================================
@pytest.fixture
def make_image():
	"""
	Factory for solid RGB test images.
	"""
	def _make(width: int = 200, height: int = 200, color=(0, 0, 255)) -> PIL.Image.Image:
		return PIL.Image.new("RGB", (width, height), color)
	return _make


#============================================
@pytest.fixture
def write_jpeg():
	"""
	Factory writing an image to disk as JPEG, optionally with EXIF bytes.
	"""
	def _write(path: pathlib.Path, image: PIL.Image.Image, exif: bytes | None = None) -> pathlib.Path:
		if exif:
			image.save(path, "JPEG", quality=95, exif=exif)
		else:
			image.save(path, "JPEG", quality=95)
		return path
	return _write
