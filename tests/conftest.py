import io

import pytest
from PIL import Image

from favicon_forge.models.image_model import ImageType, SourceImage
from favicon_forge.services.render_service import Compositor

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture
def split_image():
    """200x100: левая половина красная, правая синяя."""
    image = Image.new("RGBA", (200, 100), RED)
    image.paste(BLUE, (100, 0, 200, 100))
    yield image
    image.close()


@pytest.fixture
def source(split_image):
    buffer = io.BytesIO()
    split_image.save(buffer, format="PNG")
    data = buffer.getvalue()
    return SourceImage(
        data=data,
        pil_image=split_image.copy(),
        image_type=ImageType.PNG,
        width=split_image.width,
        height=split_image.height,
        size_bytes=len(data),
    )


@pytest.fixture
def compositor():
    return Compositor()
