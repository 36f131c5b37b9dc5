"""
API 의존성 주입
"""

from brochure.db.session import get_db
from brochure.services.brochure_editor_service import EditorSessionManager, editor_session_manager
from brochure.services.brochure_export_service import BrochureExportService

__all__ = ["get_db", "get_editor_manager", "get_export_service"]

_export_service = None


def get_editor_manager() -> EditorSessionManager:
    """에디터 세션 관리자 (테스트에서 override)"""
    return editor_session_manager


def get_export_service() -> BrochureExportService:
    global _export_service
    if _export_service is None:
        _export_service = BrochureExportService()
    return _export_service
