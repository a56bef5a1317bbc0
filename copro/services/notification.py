import json
import logging

from copro.dependencies import rabbitmq
from copro.models.board import Board
from copro.models.member import Member

logger = logging.getLogger(__name__)

HEART_ROUTING_KEY = "board.heart"


def _heart_message(board: Board, member: Member) -> dict:
    return {
        "type": "heart_board",
        "board_id": board.id,
        "board_title": board.title,
        "owner_id": board.member_id,
        "sender_id": member.id,
        "sender_name": member.name,
        "title": "게시물에 좋아요가 눌렸습니다.",
        "body": f"{member.name}님이 '{board.title}' 게시물을 좋아합니다.",
    }


async def send_heart_board_notification(board: Board, member: Member) -> None:
    """
    게시물 작성자에게 좋아요 알림 메시지를 발행합니다.
    실제 푸시 발송은 consumer가 담당하며, 발행 실패는 로그만 남기고 무시합니다.
    """
    message = json.dumps(_heart_message(board, member), ensure_ascii=False)
    try:
        await rabbitmq.publish(HEART_ROUTING_KEY, message)
    except Exception:
        logger.exception(
            "좋아요 알림 발행 실패: board_id=%s member_id=%s", board.id, member.id
        )
        return
    logger.info("좋아요 알림 발행: board_id=%s owner_id=%s", board.id, board.member_id)
