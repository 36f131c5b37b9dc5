"""
에디터 포인터 이벤트 WebSocket

메시지는 도착 순서대로 하나씩 처리되며, 처리된 메시지마다 같은 세션의
모든 연결에 state 스냅샷을 보낸다.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Optional, Set

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState
from pydantic import Field, TypeAdapter, ValidationError as PydanticValidationError

from brochure.api.deps import get_editor_manager
from brochure.core.exceptions import BrochureException, ResourceNotFoundError
from brochure.models.editor_models import (
    DragEnterLeaveMessage,
    DropMessage,
    EditorMessage,
    PingMessage,
    PointerDownMessage,
    PointerMoveMessage,
    PointerUpMessage,
)
from brochure.models.layout_models import PositionUpdate
from brochure.services.brochure_editor_service import EditorSession, EditorSessionManager

logger = logging.getLogger(__name__)

router = APIRouter()

message_adapter = TypeAdapter(Annotated[EditorMessage, Field(discriminator="type")])


class EditorConnectionManager:
    """에디터 세션별 WebSocket 연결 관리자"""

    def __init__(self):
        # session_id -> websockets
        self.active_connections: Dict[str, Set[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, session_id: str):
        await websocket.accept()
        self.active_connections.setdefault(session_id, set()).add(websocket)
        logger.info(f"에디터 세션 {session_id} 연결 (총 {len(self.active_connections[session_id])})")

    def disconnect(self, session_id: str, websocket: WebSocket):
        connections = self.active_connections.get(session_id)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            del self.active_connections[session_id]

    def connection_count(self, session_id: str) -> int:
        return len(self.active_connections.get(session_id, ()))

    async def send_personal_message(self, websocket: WebSocket, message: Dict[str, Any]):
        if websocket.client_state == WebSocketState.CONNECTED:
            await websocket.send_text(json.dumps(message, default=str))

    async def broadcast_to_session(self, session_id: str, message: Dict[str, Any]):
        """세션의 모든 연결에 전송, 끊어진 연결은 정리"""
        disconnected = []
        for websocket in list(self.active_connections.get(session_id, ())):
            try:
                if websocket.client_state == WebSocketState.CONNECTED:
                    await websocket.send_text(json.dumps(message, default=str))
                else:
                    disconnected.append(websocket)
            except (RuntimeError, WebSocketDisconnect):
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(session_id, websocket)


# 전역 연결 관리자
connection_manager = EditorConnectionManager()


def _error_message(message: str, error_code: str = "INVALID_MESSAGE", details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "type": "error",
        "data": {
            "error_code": error_code,
            "message": message,
            "details": details or {},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    }


async def handle_editor_message(session: EditorSession, message: EditorMessage) -> List[PositionUpdate]:
    """메시지 하나를 세션에 적용. 제스처 종료 시 확정된 위치 목록 반환"""
    updates: List[PositionUpdate] = []

    if isinstance(message, PointerDownMessage):
        # 끝나지 않은 제스처가 있으면 확정된 위치를 함께 반환
        if session.machine.is_active:
            updates = session.pointer_up()
        session.pointer_down(
            message.target,
            message.x,
            message.y,
            item_id=message.item_id,
            element=message.element,
            page=message.page,
        )
    elif isinstance(message, PointerMoveMessage):
        session.pointer_move(message.x, message.y)
    elif isinstance(message, PointerUpMessage):
        updates = session.pointer_up() if message.type == "pointer_up" else session.pointer_leave()
    elif isinstance(message, DragEnterLeaveMessage):
        if message.type == "drag_enter":
            session.drag_enter(message.page)
        else:
            session.drag_leave(message.page)
    elif isinstance(message, DropMessage):
        session.drop(message.page, message.payload)

    if updates:
        await session.flush_position_commits()
    return updates


@router.websocket("/sessions/{session_id}/ws")
async def editor_websocket_endpoint(
    websocket: WebSocket,
    session_id: str,
    manager: EditorSessionManager = Depends(get_editor_manager)
):
    """에디터 세션 포인터 이벤트 WebSocket"""
    try:
        session = manager.get(session_id)
    except ResourceNotFoundError:
        await websocket.close(code=4404, reason="에디터 세션을 찾을 수 없습니다")
        return

    await connection_manager.connect(websocket, session_id)

    try:
        # 연결 직후 현재 상태 전송
        await connection_manager.send_personal_message(websocket, {
            "type": "state",
            "data": session.snapshot(),
        })

        while True:
            data = await websocket.receive_text()
            try:
                message = message_adapter.validate_python(json.loads(data))
            except json.JSONDecodeError:
                await connection_manager.send_personal_message(websocket, _error_message("잘못된 메시지 형식입니다"))
                continue
            except PydanticValidationError as e:
                await connection_manager.send_personal_message(websocket, _error_message(
                    "지원하지 않는 메시지입니다",
                    details={"errors": json.loads(e.json(include_url=False))}
                ))
                continue

            if isinstance(message, PingMessage):
                await connection_manager.send_personal_message(websocket, {
                    "type": "pong",
                    "data": {"timestamp": datetime.now(timezone.utc).isoformat()}
                })
                continue

            try:
                updates = await handle_editor_message(session, message)
            except BrochureException as e:
                logger.warning(f"에디터 메시지 처리 실패: {e.message}")
                await connection_manager.send_personal_message(
                    websocket,
                    _error_message(e.message, e.error_code, e.details)
                )
                continue
            except Exception as e:
                logger.error(f"에디터 메시지 처리 중 오류: {e}")
                await connection_manager.send_personal_message(
                    websocket,
                    _error_message(f"메시지 처리 실패: {str(e)}", "INTERNAL_SERVER_ERROR")
                )
                continue

            await connection_manager.broadcast_to_session(session_id, {
                "type": "state",
                "data": {
                    **session.snapshot(),
                    "positionUpdates": [update.to_dict() for update in updates],
                },
            })

    except WebSocketDisconnect:
        logger.info(f"WebSocket 연결 해제: 에디터 세션 {session_id}")
    finally:
        # 마지막 연결이 끊기면 진행 중인 제스처는 pointer_leave 처럼 확정
        if connection_manager.connection_count(session_id) == 1 and session.machine.is_active:
            if session.pointer_leave():
                await session.flush_position_commits()
        connection_manager.disconnect(session_id, websocket)
