# relatorios/pdf/image_manager.py
import io
from typing import Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

# erros que o Pillow levanta para bytes que não são imagem (ou imagem truncada)
IMAGE_ERRORS = (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError)


def is_image_bytes(b: bytes) -> bool:
    """True se o Pillow reconhece os bytes como imagem. Não decodifica os pixels."""
    if not b:
        return False
    try:
        with Image.open(io.BytesIO(b)) as img:
            img.verify()
        return True
    except IMAGE_ERRORS:
        return False


def load_image(b: bytes) -> Image.Image:
    """
    Abre a imagem para desenho no PDF:
     - aplica a orientação EXIF (fotos de celular)
     - compõe transparência sobre fundo branco
     - devolve sempre RGB já carregada em memória
    Levanta um dos IMAGE_ERRORS se os bytes não forem uma imagem válida.
    """
    with Image.open(io.BytesIO(b)) as img:
        img.load()
        img = ImageOps.exif_transpose(img)

        has_alpha = (img.mode in ("RGBA", "LA")) or (img.mode == "P" and "transparency" in img.info)
        if has_alpha:
            rgba = img.convert("RGBA")
            bg = Image.new("RGB", img.size, (255, 255, 255))
            bg.paste(rgba.convert("RGB"), mask=rgba.split()[-1])
            return bg
        if img.mode != "RGB":
            return img.convert("RGB")
        return img.copy()


def fit_inside(img_w: float, img_h: float, box_w: float, box_h: float) -> Tuple[float, float]:
    """Maior tamanho que cabe na caixa mantendo a proporção da imagem."""
    if img_w <= 0 or img_h <= 0 or box_w <= 0 or box_h <= 0:
        return 0.0, 0.0
    ratio = min(box_w / float(img_w), box_h / float(img_h))
    return img_w * ratio, img_h * ratio
