# /memora/services/domain_service.py

import logging
from typing import Any, Dict, List, Optional

from memora.models.conversation import AssistantContext, ListItem, StatItem

# Integration seam towards the host application's own data (tasks, projects,
# meetings, absences, users, ...). The assistant only reads narrow list/count
# summaries and hands write requests over; this default gateway answers with
# empty results and accepts every write, so the engine runs standalone.

logger = logging.getLogger(__name__)


class DomainServiceError(Exception):
    """Raised by a domain gateway when the host service fails."""


class DomainGateway:
    async def list_tasks(self, context: AssistantContext, status: Optional[str] = None) -> List[ListItem]:
        return []

    async def list_projects(self, context: AssistantContext) -> List[ListItem]:
        return []

    async def list_meetings(self, context: AssistantContext) -> List[ListItem]:
        return []

    async def list_absences(self, context: AssistantContext) -> List[ListItem]:
        return []

    async def list_notifications(self, context: AssistantContext) -> List[ListItem]:
        return []

    async def list_users(self, context: AssistantContext, name: Optional[str] = None) -> List[ListItem]:
        return []

    async def list_candidates(self, context: AssistantContext) -> List[ListItem]:
        return []

    async def list_trainings(self, context: AssistantContext) -> List[ListItem]:
        return []

    async def search(self, query: str, context: AssistantContext) -> List[ListItem]:
        return []

    async def stats(self, context: AssistantContext) -> List[StatItem]:
        return []

    async def perform(self, action: str, payload: Dict[str, str], context: AssistantContext) -> Dict[str, Any]:
        """
        Hand a write request (create, delete, approve, ...) to the host.

        Returns whatever the host reports back; raising DomainServiceError
        marks the request as failed.
        """
        logger.info(f"Domain action '{action}' accepted for user {context.current_user_id or 'anonymous'}")
        return {"status": "accepted", "action": action}


# Globally accessible instance
domain_gateway = DomainGateway()
