"""Shared test fixtures for the receipt OCR test suite."""

import io
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

RECEIPT_TEXT = (
    "MERCADO CENTRAL\n"
    "Data 01-12-2023\n"
    "Subtotal R5 20,00\n"
    "TOTAL R$ 45,90"
)


@pytest.fixture
def receipt_text() -> str:
    """OCR transcript of a small supermarket receipt."""
    return RECEIPT_TEXT


@pytest.fixture
def receipt_png_bytes() -> bytes:
    """A minimal white PNG standing in for a receipt photo."""
    image = Image.fromarray(np.full((120, 80, 3), 255, dtype=np.uint8))
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"
