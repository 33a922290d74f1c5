"""
Scenario CLI Commands - Replay staffing scenarios from YAML files.

A scenario file has three sections:
- employees: contractors and staff to register, in legajo order
- projects: projects with their initial tasks, in id order
- operations: assignments, delays, task/project closing, replayed in order
"""
import click
import sys
import logging
from decimal import Decimal
from pathlib import Path
from typing import Callable, Dict, List, Optional

import yaml

from jobsite.config import ConfigurationError, JobsiteConfig, get_config
from jobsite.domain.entities import Contractor, Staff
from jobsite.domain.entities.employee import to_decimal
from jobsite.domain.exceptions import DomainError, ValidationError
from jobsite.domain.services import PortfolioService

logger = logging.getLogger(__name__)


class ScenarioError(Exception):
    """Raised when a scenario file is malformed."""
    pass


def _mapping(value, where: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ScenarioError(f"{where} must be a mapping, got {type(value).__name__}")
    return value


class ScenarioRunner:
    """
    Applies a parsed scenario to a PortfolioService.

    Operations are single-key mappings, e.g.:
        - assign: {project: 1, task: Paint, strategy: least_delayed}
        - delay: {project: 1, task: Paint, days: 1}
    """

    def __init__(self, service: PortfolioService):
        self.service = service
        self._handlers: Dict[str, Callable[[dict], None]] = {
            'assign': self._assign,
            'reassign': self._reassign,
            'delay': self._delay,
            'add_task': self._add_task,
            'finish_task': self._finish_task,
            'finish_project': self._finish_project,
        }

    @staticmethod
    def load(path: Path) -> dict:
        """Read a scenario file."""
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ScenarioError(f"Invalid YAML in scenario file: {e}")
        if not isinstance(data, dict):
            raise ScenarioError("Scenario file must contain a YAML mapping")
        return data

    def run(self, data: dict) -> List[int]:
        """
        Register employees and projects, then replay operations.

        Returns:
            Ids of the registered projects
        """
        for index, entry in enumerate(data.get('employees') or [], start=1):
            self._register_employee(_mapping(entry, f"Employee #{index}"))

        project_ids = [
            self._register_project(_mapping(entry, f"Project #{index}"))
            for index, entry in enumerate(data.get('projects') or [], start=1)
        ]

        for step, operation in enumerate(data.get('operations') or [], start=1):
            if not isinstance(operation, dict) or len(operation) != 1:
                raise ScenarioError(f"Operation #{step} must be a single-key mapping")
            (name, args), = operation.items()
            handler = self._handlers.get(name)
            if handler is None:
                raise ScenarioError(f"Operation #{step}: unknown operation '{name}'")
            logger.debug(f"Operation #{step}: {name} {args}")
            handler(_mapping(args, f"Operation #{step} ({name}) arguments"))

        return project_ids

    # =========================================================================
    # Registration
    # =========================================================================

    def _register_employee(self, entry: dict) -> int:
        kind = str(entry.get('kind', '')).lower()
        if kind == 'contractor':
            return self.service.register_contractor(entry.get('name'), entry.get('rate'))
        if kind == 'staff':
            return self.service.register_staff(
                entry.get('name'), entry.get('rate'), entry.get('category')
            )
        raise ScenarioError(f"Unknown employee kind '{entry.get('kind')}'")

    def _register_project(self, entry: dict) -> int:
        tasks = [_mapping(t, f"Task #{i}") for i, t in enumerate(entry.get('tasks') or [], start=1)]
        client = entry.get('client') or []
        if isinstance(client, str):
            client = [client]
        return self.service.register_project(
            titles=[t.get('title') for t in tasks],
            descriptions=[t.get('description', '') for t in tasks],
            days=[t.get('days') for t in tasks],
            address=entry.get('address'),
            client=client,
            start=entry.get('start'),
            end=entry.get('end'),
        )

    # =========================================================================
    # Operations
    # =========================================================================

    def _assign(self, args: dict) -> None:
        strategy = args.get('strategy', 'first_available')
        if strategy == 'first_available':
            self.service.assign_first_available(args['project'], args['task'])
        elif strategy == 'least_delayed':
            self.service.assign_least_delayed(args['project'], args['task'])
        else:
            raise ScenarioError(f"Unknown assignment strategy '{strategy}'")

    def _reassign(self, args: dict) -> None:
        if 'employee' in args:
            self.service.reassign_employee(args['project'], args['employee'], args['task'])
        else:
            self.service.reassign_least_delayed(args['project'], args['task'])

    def _delay(self, args: dict) -> None:
        self.service.record_delay(args['project'], args['task'], args['days'])

    def _add_task(self, args: dict) -> None:
        self.service.add_task(
            args['project'], args['title'], args.get('description', ''), args['days']
        )

    def _finish_task(self, args: dict) -> None:
        self.service.finish_task(args['project'], args['task'])

    def _finish_project(self, args: dict) -> None:
        self.service.finish_project(args['project'], args['end'])


def _load_config(config_path: Optional[str]) -> JobsiteConfig:
    return JobsiteConfig(Path(config_path)) if config_path else get_config()


@click.command()
@click.argument('scenario', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--config',
    'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Path to a jobsite configuration YAML file'
)
def run(scenario: str, config_path: Optional[str]):
    """Replay a YAML scenario and print every project summary.

    Example:
        jobsite run scenarios/kitchen_remodel.yaml
    """
    try:
        service = PortfolioService(config=_load_config(config_path))
        project_ids = ScenarioRunner(service).run(ScenarioRunner.load(Path(scenario)))
    except (DomainError, ScenarioError, ConfigurationError) as e:
        logger.error(f"Scenario {scenario} failed: {e}")
        click.echo(click.style(f"✗ {e}", fg='red'), err=True)
        sys.exit(1)
    except KeyError as e:
        click.echo(click.style(f"✗ Operation is missing argument {e}", fg='red'), err=True)
        sys.exit(1)

    for project_id in project_ids:
        click.echo(service.project_summary(project_id))
        click.echo("")


@click.command()
@click.option(
    '--kind',
    type=click.Choice(['contractor', 'staff'], case_sensitive=False),
    required=True,
    help='Billing strategy of the employee'
)
@click.option('--rate', type=str, required=True, help='Hourly (contractor) or daily (staff) rate')
@click.option('--days', type=str, required=True, help='Task duration in days')
@click.option('--category', default='INITIAL', help='Staff category (INITIAL, TECHNICIAN, EXPERT)')
@click.option('--delayed', is_flag=True, help='Quote as if the task was delayed')
def quote(kind: str, rate: str, days: str, category: str, delayed: bool):
    """Quote the cost of a single task for an employee type.

    Example:
        jobsite quote --kind staff --rate 100 --days 2 --category technician
    """
    try:
        if kind.lower() == 'contractor':
            employee = Contractor(legajo=0, name='quote', hourly_rate=Decimal(rate))
        else:
            employee = Staff(legajo=0, name='quote', daily_rate=Decimal(rate), category=category)
        duration = to_decimal(days, "days")
        if duration <= 0:
            raise ValidationError("days", "must be positive")
    except ArithmeticError:
        click.echo(click.style("✗ Rate and days must be numbers", fg='red'), err=True)
        sys.exit(1)
    except DomainError as e:
        click.echo(click.style(f"✗ {e}", fg='red'), err=True)
        sys.exit(1)

    cost = employee.compute_task_cost(duration, delayed)
    click.echo(f"Task cost: ${cost:.2f}")


def register_commands(cli):
    """Register scenario commands with main CLI."""
    cli.add_command(run)
    cli.add_command(quote)
