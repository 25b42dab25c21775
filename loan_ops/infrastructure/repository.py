"""Read-only application sources consumed by the API layer"""

from typing import List, Protocol
from loan_ops.domain.models import Application, DirectoryContext
from loan_ops.domain.exceptions import ApplicationNotFoundError


class ApplicationRepository(Protocol):
    """Anything that can materialize the application set and its directories"""

    async def get_applications(self) -> List[Application]: ...

    async def get_directory(self) -> DirectoryContext: ...


class InMemoryRepository:
    """Fixed collections, for tests and demo mode"""

    def __init__(self, applications: List[Application], directory: DirectoryContext):
        self._applications = list(applications)
        self._directory = directory

    async def get_applications(self) -> List[Application]:
        return list(self._applications)

    async def get_directory(self) -> DirectoryContext:
        return self._directory


async def get_application(repository: ApplicationRepository, application_id: int) -> Application:
    """
    Raises:
        ApplicationNotFoundError: No application with that id
    """
    for app in await repository.get_applications():
        if app.id == application_id:
            return app
    raise ApplicationNotFoundError(f"Application {application_id} not found")
