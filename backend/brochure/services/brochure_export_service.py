"""
브로셔 내보내기 서비스
편집 전용 요소를 숨긴 채 페이지를 래스터화하고 PNG/JPEG/PDF 로 묶는다
"""

import os
import zipfile
from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional, Protocol

# 이미지 처리
from PIL import Image, ImageDraw, ImageFont

# PDF 생성
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as pdf_canvas

from brochure.core.config import settings
from brochure.core.exceptions import FileProcessingError
from brochure.models.layout_models import ElementKind, ExportFormat
from brochure.services.brochure_editor_service import EditorSession
from brochure.services.brochure_geometry import (
    BANNER_HEIGHT,
    DATE_LABEL_HEIGHT,
    DATE_LABEL_WIDTH,
    FOOTER_HEIGHT,
    HEADER_HEIGHT,
    LOGO_BASE_SIZE,
    PRODUCT_FOOTPRINT,
)
from brochure.services.logging_service import logging_service
from brochure.utils.logger import get_logger

logger = get_logger(__name__)

MEDIA_TYPES = {
    ExportFormat.PNG: "image/png",
    ExportFormat.JPEG: "image/jpeg",
    ExportFormat.PDF: "application/pdf",
}

# 기본 템플릿 색상
HEADER_COLOR = "#f59e0b"
BANNER_COLOR = "#111827"
FOOTER_COLOR = "#f59e0b"
BACKGROUND_COLOR = "#f5d68a"
TITLE_COLOR = "#dc2626"


@dataclass
class ExportResult:
    filename: str
    media_type: str
    content: bytes
    page_count: int


class PageRenderer(Protocol):
    """보이는 캔버스 영역 하나를 비트맵으로 렌더링"""

    def render_page(self, session: EditorSession, page: int, scale: int) -> Image.Image:
        ...


class PillowPageRenderer:
    """헤더/배너/푸터 밴드, 상품 타일, 로고, 회사명, 날짜 라벨을 그리는 기본 렌더러"""

    def __init__(self):
        self._font_path = self._find_font()

    @staticmethod
    def _find_font() -> Optional[str]:
        font_paths = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/System/Library/Fonts/Helvetica.ttc",
            "/Windows/Fonts/arial.ttf",
        ]
        for font_path in font_paths:
            if os.path.exists(font_path):
                return font_path
        return None

    def _font(self, size: int):
        if self._font_path:
            try:
                return ImageFont.truetype(self._font_path, size)
            except OSError as e:
                logger.warning("폰트 로드 실패, 기본 폰트 사용", context={"font": self._font_path, "error": str(e)})
        return ImageFont.load_default()

    def render_page(self, session: EditorSession, page: int, scale: int) -> Image.Image:
        canvas = session.store.canvas
        width = int(canvas.width * scale)
        height = int(canvas.height * scale)

        image = Image.new("RGB", (width, height), BACKGROUND_COLOR)
        draw = ImageDraw.Draw(image)

        # 템플릿 밴드
        draw.rectangle([0, 0, width, HEADER_HEIGHT * scale], fill=HEADER_COLOR)
        draw.rectangle(
            [0, HEADER_HEIGHT * scale, width, (HEADER_HEIGHT + BANNER_HEIGHT) * scale],
            fill=BANNER_COLOR
        )
        draw.rectangle([0, height - FOOTER_HEIGHT * scale, width, height], fill=FOOTER_COLOR)

        for item in session.store.items_on_page(page):
            tile = self._product_tile(item.name, item.new_price, item.scale.scale_x, scale)
            if item.rotation:
                tile = tile.rotate(-item.rotation, expand=True, resample=Image.Resampling.BICUBIC)
            center_x = (item.position.x + PRODUCT_FOOTPRINT / 2) * scale
            center_y = (item.position.y + PRODUCT_FOOTPRINT / 2) * scale
            image.paste(tile, (int(center_x - tile.width / 2), int(center_y - tile.height / 2)), tile)

        logo = session.store.element(ElementKind.LOGO)
        if session.draft.logo_id is not None:
            size = max(int(LOGO_BASE_SIZE * logo.scale * scale), 1)
            logo_tile = Image.new("RGBA", (size, size), (255, 255, 255, 230))
            ImageDraw.Draw(logo_tile).rectangle([0, 0, size - 1, size - 1], outline=BANNER_COLOR, width=max(scale, 1))
            if logo.rotation:
                logo_tile = logo_tile.rotate(-logo.rotation, expand=True, resample=Image.Resampling.BICUBIC)
            center = ((logo.position.x + LOGO_BASE_SIZE / 2) * scale, (logo.position.y + LOGO_BASE_SIZE / 2) * scale)
            image.paste(logo_tile, (int(center[0] - logo_tile.width / 2), int(center[1] - logo_tile.height / 2)), logo_tile)

        if session.draft.show_company_name and session.draft.company_name:
            company = session.store.element(ElementKind.COMPANY_NAME)
            draw.text(
                (company.position.x * scale, company.position.y * scale),
                session.draft.company_name,
                font=self._font(20 * scale),
                fill=TITLE_COLOR
            )

        if session.date_labels_visible:
            label = session.store.date_position(page)
            box = [label.x * scale, label.y * scale, (label.x + DATE_LABEL_WIDTH) * scale, (label.y + DATE_LABEL_HEIGHT) * scale]
            draw.rectangle(box, fill="#ffffff", outline="#e5e7eb")
            text = f"{session.draft.start_date:%b %d} - {session.draft.end_date:%b %d, %Y}"
            draw.text((box[0] + 6 * scale, box[1] + 8 * scale), text, font=self._font(10 * scale), fill="#1f2937")

        return image

    def _product_tile(self, name: str, price: float, item_scale: float, scale: int) -> Image.Image:
        size = max(int(PRODUCT_FOOTPRINT * item_scale * scale), 1)
        tile = Image.new("RGBA", (size, size), (255, 255, 255, 240))
        draw = ImageDraw.Draw(tile)
        draw.rectangle([0, 0, size - 1, size - 1], outline="#d1d5db", width=max(scale, 1))
        font_size = max(int(11 * item_scale * scale), 6)
        draw.text((6 * scale, size - font_size * 3), name[:24], font=self._font(font_size), fill="#111827")
        draw.text((6 * scale, size - int(font_size * 1.6)), f"{price:.2f}", font=self._font(font_size), fill=TITLE_COLOR)
        return tile


class BrochureExportService:
    """내보내기 협력자: 페이지 렌더링 결과를 이미지/ZIP/PDF 로 변환"""

    def __init__(self, renderer: Optional[PageRenderer] = None, scale: Optional[int] = None):
        self.renderer = renderer or PillowPageRenderer()
        self.scale = scale or settings.EXPORT_SCALE

    def export(self, session: EditorSession, export_format: ExportFormat) -> ExportResult:
        export_format = ExportFormat(export_format)
        pages = list(range(1, session.store.page_count + 1))

        with session.hidden_edit_controls():
            try:
                images = [self.renderer.render_page(session, page, self.scale) for page in pages]
            except (OSError, ValueError) as e:
                logging_service.log_error(error=e, context="브로셔 페이지 렌더링 실패", session_id=session.session_id)
                raise FileProcessingError("브로셔 페이지를 렌더링할 수 없습니다") from e

        if export_format == ExportFormat.PDF:
            result = ExportResult("brochure.pdf", MEDIA_TYPES[export_format], self._to_pdf(images), len(images))
        elif len(images) == 1:
            result = ExportResult(
                f"brochure.{export_format.value}",
                MEDIA_TYPES[export_format],
                self._encode(images[0], export_format),
                1
            )
        else:
            result = ExportResult("brochure-pages.zip", "application/zip", self._to_zip(images, export_format), len(images))

        logging_service.log_editor_event(
            session.session_id,
            "exported",
            format=export_format.value,
            pages=len(images),
            size_bytes=len(result.content),
        )
        return result

    @staticmethod
    def _encode(image: Image.Image, export_format: ExportFormat) -> bytes:
        buffer = BytesIO()
        if export_format == ExportFormat.JPEG:
            image.convert("RGB").save(buffer, format="JPEG", quality=95)
        else:
            image.save(buffer, format="PNG")
        return buffer.getvalue()

    def _to_zip(self, images: List[Image.Image], export_format: ExportFormat) -> bytes:
        buffer = BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zip_file:
            for index, image in enumerate(images, start=1):
                zip_file.writestr(f"page-{index}.{export_format.value}", self._encode(image, export_format))
        return buffer.getvalue()

    def _to_pdf(self, images: List[Image.Image]) -> bytes:
        """페이지마다 캔버스 크기(포인트)로 한 장씩"""
        buffer = BytesIO()
        page_size = (images[0].width / self.scale, images[0].height / self.scale)
        pdf = pdf_canvas.Canvas(buffer, pagesize=page_size)
        pdf.setTitle("Brochure")

        for image in images:
            png = BytesIO()
            image.save(png, format="PNG")
            png.seek(0)
            pdf.drawImage(ImageReader(png), 0, 0, page_size[0], page_size[1])
            pdf.showPage()

        pdf.save()
        return buffer.getvalue()
