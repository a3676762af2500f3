"""
Tests for the rendering backends.

The ModernGL tests need an OpenGL 3.3 context and are skipped where
none can be created (headless CI without a GL driver).
"""

import numpy as np
import pytest

from pixelforge.core.data_types import RGBA
from pixelforge.core.errors import BackendUnavailable
from pixelforge.core.rasterizer import Rasterizer, rasterize
from pixelforge.gpu import BACKEND_TYPES, CPUBackend, TextureFormat, create_backend


@pytest.fixture
def gl_backend():
    moderngl_backend = pytest.importorskip("pixelforge.gpu.moderngl_backend")
    backend = moderngl_backend.ModernGLBackend(standalone=True)
    try:
        backend.initialize()
    except BackendUnavailable as exc:
        pytest.skip(f"No OpenGL context: {exc}")
    yield backend
    backend.shutdown()


class TestCreateBackend:
    """Tests for the backend factory."""

    def test_backend_types(self):
        assert BACKEND_TYPES == ("cpu", "moderngl")

    def test_cpu(self):
        backend = create_backend("cpu")

        assert isinstance(backend, CPUBackend)
        assert not backend.is_initialized

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_backend("metal")


class TestCPUBackend:
    """Tests for the host-memory backend."""

    def test_lifecycle(self):
        backend = CPUBackend()
        assert backend.device_info == "cpu"

        backend.initialize()
        backend.initialize()
        assert backend.is_initialized

        backend.shutdown()
        assert not backend.is_initialized

    def test_create_requires_initialize(self):
        with pytest.raises(BackendUnavailable):
            CPUBackend().create_texture(4, 4)

    def test_texture_starts_cleared(self):
        backend = CPUBackend()
        backend.initialize()

        texture = backend.create_texture(3, 2)

        assert texture.shape == (2, 3, 4)
        assert texture.nbytes == 24
        assert (texture.download() == 0).all()

    def test_upload_download(self):
        backend = CPUBackend()
        backend.initialize()
        texture = backend.create_texture(2, 2)
        data = np.arange(16, dtype=np.uint8).reshape(2, 2, 4)

        texture.upload(data)

        np.testing.assert_array_equal(texture.download(), data)
        assert texture.read_bytes() == data.tobytes()

    def test_upload_wrong_shape(self):
        backend = CPUBackend()
        backend.initialize()
        texture = backend.create_texture(2, 2)

        with pytest.raises(ValueError):
            texture.upload(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_float_texture(self):
        backend = CPUBackend()
        backend.initialize()
        texture = backend.create_texture(1, 1, TextureFormat.RGBA32F)

        texture.clear([0.25, 0.5, 0.75, 1.0])

        np.testing.assert_allclose(texture.download()[0, 0], [0.25, 0.5, 0.75, 1.0])
        assert texture.nbytes == 16

    def test_destroy_counts_once(self):
        backend = CPUBackend()
        backend.initialize()
        texture = backend.create_texture(1, 1)

        backend.destroy_texture(texture)
        backend.destroy_texture(texture)

        assert backend.live_textures == 0


class TestModernGLBackend:
    """Tests for the OpenGL backend."""

    def test_device_info(self, gl_backend):
        assert "OpenGL" in gl_backend.device_info

    def test_rasterize_matches_host(self, gl_backend):
        color = RGBA(37, 180, 90, 0.6)

        data = Rasterizer(gl_backend, 32, 16).rasterize(color)

        assert data == rasterize(color, 32, 16)

    def test_texture_round_trip(self, gl_backend):
        texture = gl_backend.create_texture(4, 3)
        data = np.random.default_rng(0).integers(0, 256, (3, 4, 4), dtype=np.uint8)

        try:
            texture.upload(data)
            np.testing.assert_array_equal(texture.download(), data)
        finally:
            gl_backend.destroy_texture(texture)
