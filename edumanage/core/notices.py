# edumanage/core/notices.py
import logging
from typing import List, Optional

from edumanage.schemas.common import Notice

logger = logging.getLogger(__name__)


class NoticeBoard:
    """Collects the user-visible notices raised while serving one request"""

    def __init__(self):
        self._notices: List[Notice] = []

    def success(self, message: str) -> Notice:
        notice = Notice(level="success", message=message)
        self._notices.append(notice)
        return notice

    def error(self, message: str) -> Notice:
        notice = Notice(level="error", message=message)
        self._notices.append(notice)
        logger.info(f"Error notice: {message}")
        return notice

    @property
    def notices(self) -> List[Notice]:
        return list(self._notices)

    @property
    def last(self) -> Optional[Notice]:
        return self._notices[-1] if self._notices else None

    def last_message(self, default: str = "") -> str:
        return self.last.message if self.last else default
