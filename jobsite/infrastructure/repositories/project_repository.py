"""
Project Repository - Registry of projects keyed by project number.
"""
from datetime import date
from typing import Iterable, List, Optional, Tuple

from jobsite.domain.entities import Project, ProjectStatus, ClientInfo, MarkupPolicy
from jobsite.domain.exceptions import ProjectNotFoundError
from .base_repository import BaseRepository

# (title, description, duration in days)
InitialTask = Tuple[str, str, float]


class ProjectRepository(BaseRepository[Project]):
    """Repository for projects."""

    def _key(self, entity: Project) -> int:
        return entity.id

    def _not_found(self, entity_id: int) -> Exception:
        return ProjectNotFoundError(entity_id)

    def create(
        self,
        client: ClientInfo,
        address: str,
        start_date: date,
        estimated_end_date: date,
        initial_tasks: Iterable[InitialTask] = (),
        markup_policy: Optional[MarkupPolicy] = None,
    ) -> Project:
        """
        Register a new project together with its initial tasks.

        The project is stored, and its number consumed, only if every
        initial task is valid.

        Args:
            client: Client contact data
            address: Site address
            start_date: Planned start
            estimated_end_date: Planned end, already covering the initial tasks
            initial_tasks: Tasks attached without moving the dates
            markup_policy: Billing markup (defaults when omitted)

        Returns:
            The new project with its id assigned
        """
        def build(project_id: int) -> Project:
            project = Project(
                project_id=project_id,
                client=client,
                address=address,
                start_date=start_date,
                estimated_end_date=estimated_end_date,
                markup_policy=markup_policy,
            )
            for title, description, days in initial_tasks:
                project.add_initial_task(title, description, days)
            return project

        return self._create(build)

    def get_by_status(self, status: ProjectStatus) -> List[Project]:
        """Projects currently in the given status."""
        return self.filter(lambda p: p.status is status)
