import io
import os
import sys
import base64

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture
def leaf_png_base64():
    """Small green PNG, base64 without a data URI prefix"""
    from PIL import Image

    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), (40, 140, 60)).save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("utf-8")


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from agri_ai.main import app

    return TestClient(app)
