from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from betterlife.api.deps import (
    get_close_chat_session_use_case,
    get_get_chat_session_use_case,
    get_open_chat_session_use_case,
    get_optional_profile,
    get_send_chat_message_use_case,
)
from betterlife.api.schemas.chat import (
    ChatMessageResponse,
    ChatSessionResponse,
    OpenChatSessionRequest,
    SendChatMessageRequest,
    SendChatMessageResponse,
)
from betterlife.application.dto.chat import ChatSessionOutput
from betterlife.application.use_cases.chat_sessions import (
    CloseChatSessionUseCase,
    GetChatSessionUseCase,
    OpenChatSessionUseCase,
    SendChatMessageUseCase,
)
from betterlife.domain.entities.chat import ChatMessage
from betterlife.domain.entities.user import UserProfile
from betterlife.domain.exceptions import ChatSessionBusyError, ChatSessionNotFoundError


router = APIRouter()


def _message_response(message: ChatMessage) -> ChatMessageResponse:
    return ChatMessageResponse(
        id=message.id,
        text=message.text,
        sender=message.sender,
        timestamp=message.timestamp,
        topic=message.topic,
    )


def _session_response(output: ChatSessionOutput) -> ChatSessionResponse:
    return ChatSessionResponse(
        session_id=output.session_id,
        topic=output.topic,
        busy=output.busy,
        messages=[_message_response(message) for message in output.messages],
    )


@router.post("/v1/chat/sessions", response_model=ChatSessionResponse)
def open_chat_session(
    req: OpenChatSessionRequest,
    profile: UserProfile | None = Depends(get_optional_profile),
    use_case: OpenChatSessionUseCase = Depends(get_open_chat_session_use_case),
):
    return _session_response(use_case.execute(topic=req.topic, profile=profile))


@router.get("/v1/chat/sessions/{session_id}", response_model=ChatSessionResponse)
def get_chat_session(
    session_id: str,
    profile: UserProfile | None = Depends(get_optional_profile),
    use_case: GetChatSessionUseCase = Depends(get_get_chat_session_use_case),
):
    try:
        output = use_case.execute(session_id=session_id, profile=profile)
    except ChatSessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _session_response(output)


@router.post("/v1/chat/sessions/{session_id}/messages", response_model=SendChatMessageResponse)
def send_chat_message(
    session_id: str,
    req: SendChatMessageRequest,
    profile: UserProfile | None = Depends(get_optional_profile),
    use_case: SendChatMessageUseCase = Depends(get_send_chat_message_use_case),
):
    try:
        output = use_case.execute(session_id=session_id, text=req.text, profile=profile)
    except ChatSessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ChatSessionBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return SendChatMessageResponse(
        user_message=_message_response(output.user_message),
        reply=_message_response(output.reply),
    )


@router.delete("/v1/chat/sessions/{session_id}", status_code=204)
def close_chat_session(
    session_id: str,
    profile: UserProfile | None = Depends(get_optional_profile),
    use_case: CloseChatSessionUseCase = Depends(get_close_chat_session_use_case),
):
    try:
        use_case.execute(session_id=session_id, profile=profile)
    except ChatSessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)
