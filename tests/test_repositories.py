"""
Unit Tests for id sequences and the in-memory registries.
"""
import pytest
from datetime import date

from jobsite.domain import IdSequence
from jobsite.domain.entities import Contractor, Staff, ClientInfo, ProjectStatus
from jobsite.domain.exceptions import (
    ValidationError,
    EmployeeNotFoundError,
    ProjectNotFoundError,
)
from jobsite.infrastructure.repositories import EmployeeRepository, ProjectRepository


class TestIdSequence:
    """Tests for IdSequence."""

    def test_allocates_sequentially(self):
        seq = IdSequence()
        assert seq.allocate(lambda n: n) == 1
        assert seq.allocate(lambda n: n) == 2
        assert seq.peek() == 3

    def test_failed_factory_does_not_advance(self):
        """Test that a rejected construction never burns an id."""
        seq = IdSequence()

        def explode(n):
            raise ValidationError("name", "must not be empty")

        with pytest.raises(ValidationError):
            seq.allocate(explode)
        assert seq.peek() == 1

    def test_reset(self):
        seq = IdSequence(start=100)
        seq.allocate(lambda n: n)
        seq.reset()
        assert seq.peek() == 100


class TestEmployeeRepository:
    """Tests for EmployeeRepository."""

    @pytest.fixture
    def repo(self):
        return EmployeeRepository()

    def test_create_assigns_legajos(self, repo):
        a = repo.create_contractor("Carla", 10)
        b = repo.create_staff("Ana", 100, "initial")
        assert (a.legajo, b.legajo) == (1, 2)
        assert isinstance(a, Contractor)
        assert isinstance(b, Staff)
        assert len(repo) == 2

    def test_invalid_employee_not_stored(self, repo):
        with pytest.raises(ValidationError):
            repo.create_staff("Ana", 100, "chief")
        assert repo.count() == 0
        assert repo.create_contractor("Carla", 10).legajo == 1

    def test_require_unknown(self, repo):
        with pytest.raises(EmployeeNotFoundError) as exc:
            repo.require(42)
        assert exc.value.legajo == 42
        assert repo.get_by_id(42) is None

    def test_first_available(self, repo):
        a = repo.create_contractor("Carla", 10)
        b = repo.create_contractor("Diego", 12)
        a.assign()
        assert repo.first_available() is b
        b.assign()
        assert repo.first_available() is None

    def test_least_delayed_available(self, repo):
        a = repo.create_contractor("Carla", 10)
        b = repo.create_contractor("Diego", 12)
        c = repo.create_contractor("Elena", 12)
        a.increment_delays()
        assert repo.least_delayed_available() is b
        b.assign()
        assert repo.least_delayed_available() is c

    def test_least_delayed_none_available(self, repo):
        assert repo.least_delayed_available() is None

    def test_clear_restarts_numbering(self, repo):
        repo.create_contractor("Carla", 10)
        repo.clear()
        assert len(repo) == 0
        assert repo.create_contractor("Diego", 12).legajo == 1

    def test_shared_sequence_is_injectable(self):
        seq = IdSequence(start=500)
        repo = EmployeeRepository(sequence=seq)
        assert repo.create_contractor("Carla", 10).legajo == 500


class TestProjectRepository:
    """Tests for ProjectRepository."""

    @pytest.fixture
    def repo(self):
        return ProjectRepository()

    def _create(self, repo, tasks=()):
        return repo.create(
            client=ClientInfo(name="Laura"),
            address="Calle 1",
            start_date=date(2024, 1, 1),
            estimated_end_date=date(2024, 1, 10),
            initial_tasks=tasks,
        )

    def test_create_with_initial_tasks(self, repo):
        project = self._create(repo, [("Paint", "Walls", 2), ("Tile", "Floor", 1)])
        assert project.id == 1
        assert project.task_titles() == ["Paint", "Tile"]
        assert project.estimated_end_date == date(2024, 1, 10)
        assert repo.require(1) is project

    def test_invalid_initial_task_rolls_back(self, repo):
        """Test that a bad initial task leaves no project and no used id."""
        with pytest.raises(ValidationError):
            self._create(repo, [("Paint", "Walls", 2), ("Tile", "Floor", 0.1)])
        assert repo.count() == 0
        assert self._create(repo).id == 1

    def test_require_unknown(self, repo):
        with pytest.raises(ProjectNotFoundError):
            repo.require(3)

    def test_get_by_status(self, repo):
        first = self._create(repo)
        second = self._create(repo)
        second.finish(date(2024, 1, 5))
        assert repo.get_by_status(ProjectStatus.PENDING) == [first]
        assert repo.get_by_status(ProjectStatus.FINISHED) == [second]
        assert 2 in repo
