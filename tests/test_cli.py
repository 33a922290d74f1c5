"""
Tests for the jobsite CLI commands.
"""
import pytest
from pathlib import Path
from click.testing import CliRunner

from jobsite import __version__
from jobsite.cli import cli
from jobsite.cli.scenario_commands import ScenarioRunner, ScenarioError
from jobsite.domain.exceptions import ProjectFinishedError


EXAMPLE_SCENARIO = Path(__file__).parent.parent / "scenarios" / "kitchen_remodel.yaml"

KITCHEN_SCENARIO = """
employees:
  - {kind: staff, name: Ana, rate: 100, category: technician}
  - {kind: contractor, name: Carla, rate: 10}

projects:
  - address: Av. Siempre Viva 742
    client: [Laura Gomez, laura@example.com, 555-0101]
    start: 2024-01-01
    end: 2024-01-01
    tasks:
      - {title: Paint, description: Walls, days: 2}

operations:
  - assign: {project: 1, task: Paint, strategy: least_delayed}
  - finish_task: {project: 1, task: Paint}
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def scenario_file(tmp_path):
    def write(text):
        path = tmp_path / "scenario.yaml"
        path.write_text(text)
        return str(path)
    return write


# =============================================================================
# run
# =============================================================================

class TestRunCommand:
    """Tests for replaying scenario files."""

    def test_prints_project_summary(self, runner, scenario_file):
        result = runner.invoke(cli, ['run', scenario_file(KITCHEN_SCENARIO)])
        assert result.exit_code == 0, result.output
        assert "Project #1" in result.output
        assert "Client: Laura Gomez" in result.output
        assert "Phone: 555-0101" in result.output
        assert "Status: ACTIVE" in result.output
        assert "  - Paint - Ana (historical) - Finished" in result.output
        assert "Total cost: $275.40" in result.output

    def test_delay_and_late_finish(self, runner, scenario_file):
        text = KITCHEN_SCENARIO + (
            "  - delay: {project: 1, task: Paint, days: 1}\n"
            "  - finish_project: {project: 1, end: 2024-01-05}\n"
        )
        text = text.replace(
            "  - finish_task: {project: 1, task: Paint}\n", ""
        )
        result = runner.invoke(cli, ['run', scenario_file(text)])
        assert result.exit_code == 0, result.output
        assert "Status: FINISHED" in result.output
        assert "Actual end date: 2024-01-05" in result.output
        # 3 billed days at $100, no bonus, delayed markup
        assert "Total cost: $375.00" in result.output

    def test_domain_error_exits_with_1(self, runner, scenario_file):
        text = KITCHEN_SCENARIO + "  - finish_task: {project: 1, task: Paint}\n"
        result = runner.invoke(cli, ['run', scenario_file(text)])
        assert result.exit_code == 1
        assert "already finished" in result.output

    def test_unknown_operation_exits_with_1(self, runner, scenario_file):
        text = KITCHEN_SCENARIO + "  - demolish: {project: 1}\n"
        result = runner.invoke(cli, ['run', scenario_file(text)])
        assert result.exit_code == 1
        assert "unknown operation 'demolish'" in result.output

    def test_missing_argument_exits_with_1(self, runner, scenario_file):
        text = KITCHEN_SCENARIO + "  - delay: {project: 1, task: Paint}\n"
        result = runner.invoke(cli, ['run', scenario_file(text)])
        assert result.exit_code == 1
        assert "missing argument 'days'" in result.output

    def test_non_numeric_rate_exits_with_1(self, runner, scenario_file):
        text = KITCHEN_SCENARIO.replace("rate: 10}", "rate: abc}")
        result = runner.invoke(cli, ['run', scenario_file(text)])
        assert result.exit_code == 1
        assert "✗" in result.output
        assert "hourly_rate" in result.output
        assert not isinstance(result.exception, ArithmeticError)

    def test_list_arguments_exit_with_1(self, runner, scenario_file):
        text = KITCHEN_SCENARIO + "  - delay: [1, Paint, 2]\n"
        result = runner.invoke(cli, ['run', scenario_file(text)])
        assert result.exit_code == 1
        assert "must be a mapping" in result.output

    def test_broken_config_exits_with_1(self, runner, scenario_file, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("- not\n- a mapping\n")
        result = runner.invoke(
            cli, ['run', scenario_file(KITCHEN_SCENARIO), '--config', str(config)]
        )
        assert result.exit_code == 1
        assert "YAML mapping" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ['run', str(tmp_path / "nope.yaml")])
        assert result.exit_code != 0

    def test_custom_config(self, runner, scenario_file, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("report:\n  currency_symbol: 'ARS '\n  decimal_places: 1\n")
        result = runner.invoke(
            cli, ['run', scenario_file(KITCHEN_SCENARIO), '--config', str(config)]
        )
        assert result.exit_code == 0, result.output
        assert "Total cost: ARS 275.4" in result.output

    def test_example_scenario(self, runner):
        """Test that the example scenario shipped with the repo replays cleanly."""
        result = runner.invoke(cli, ['run', str(EXAMPLE_SCENARIO)])
        assert result.exit_code == 0, result.output
        assert "Project #2" in result.output
        assert "Status: FINISHED" in result.output

    def test_verbose_flag(self, runner, scenario_file):
        result = runner.invoke(cli, ['-v', 'run', scenario_file(KITCHEN_SCENARIO)])
        assert result.exit_code == 0, result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output


# =============================================================================
# quote
# =============================================================================

class TestQuoteCommand:
    """Tests for single-task quotes."""

    def test_staff_quote(self, runner):
        result = runner.invoke(
            cli, ['quote', '--kind', 'staff', '--rate', '100', '--days', '2', '--category', 'technician']
        )
        assert result.exit_code == 0, result.output
        assert "Task cost: $204.00" in result.output

    def test_delayed_staff_quote(self, runner):
        result = runner.invoke(
            cli, ['quote', '--kind', 'staff', '--rate', '100', '--days', '1.01', '--delayed']
        )
        assert result.exit_code == 0, result.output
        assert "Task cost: $200.00" in result.output

    def test_contractor_quote(self, runner):
        result = runner.invoke(cli, ['quote', '--kind', 'contractor', '--rate', '10', '--days', '1.5'])
        assert result.exit_code == 0, result.output
        assert "Task cost: $120.00" in result.output

    def test_non_numeric_rate(self, runner):
        result = runner.invoke(cli, ['quote', '--kind', 'contractor', '--rate', 'ten', '--days', '1'])
        assert result.exit_code == 1
        assert "must be numbers" in result.output

    def test_infinite_days(self, runner):
        result = runner.invoke(cli, ['quote', '--kind', 'staff', '--rate', '100', '--days', 'inf'])
        assert result.exit_code == 1
        assert "finite" in result.output

    def test_invalid_category(self, runner):
        result = runner.invoke(
            cli, ['quote', '--kind', 'staff', '--rate', '100', '--days', '1', '--category', 'boss']
        )
        assert result.exit_code == 1
        assert "category" in result.output


# =============================================================================
# ScenarioRunner
# =============================================================================

class TestScenarioRunner:
    """Tests for applying parsed scenarios directly."""

    def test_returns_project_ids(self, service):
        data = {
            'projects': [
                {'address': 'A', 'client': 'Laura', 'start': '2024-01-01', 'end': '2024-01-02',
                 'tasks': [{'title': 'Paint', 'days': 1}]},
                {'address': 'B', 'client': 'Marta', 'start': '2024-01-01', 'end': '2024-01-02',
                 'tasks': [{'title': 'Tile', 'days': 1}]},
            ],
        }
        assert ScenarioRunner(service).run(data) == [1, 2]
        assert service.pending_projects() == [(1, 'A'), (2, 'B')]

    def test_add_task_and_reassign(self, service):
        data = {
            'employees': [
                {'kind': 'contractor', 'name': 'Carla', 'rate': 10},
                {'kind': 'contractor', 'name': 'Diego', 'rate': 10},
            ],
            'projects': [
                {'address': 'A', 'client': ['Laura'], 'start': '2024-01-01', 'end': '2024-01-02',
                 'tasks': [{'title': 'Paint', 'days': 1}]},
            ],
            'operations': [
                {'add_task': {'project': 1, 'title': 'Tile', 'days': 1}},
                {'assign': {'project': 1, 'task': 'Paint'}},
                {'reassign': {'project': 1, 'task': 'Paint', 'employee': 2}},
            ],
        }
        ScenarioRunner(service).run(data)
        assert service.task_titles(1) == ['Paint', 'Tile']
        assert service.available_employees() == [1]
        assert service.employees_on_project(1) == [(1, 'Carla'), (2, 'Diego')]

    def test_unknown_employee_kind(self, service):
        with pytest.raises(ScenarioError, match="Unknown employee kind"):
            ScenarioRunner(service).run({'employees': [{'kind': 'intern', 'name': 'Eva'}]})

    def test_unknown_strategy(self, service):
        data = {
            'employees': [{'kind': 'contractor', 'name': 'Carla', 'rate': 10}],
            'projects': [
                {'address': 'A', 'client': 'Laura', 'start': '2024-01-01', 'end': '2024-01-02',
                 'tasks': [{'title': 'Paint', 'days': 1}]},
            ],
            'operations': [{'assign': {'project': 1, 'task': 'Paint', 'strategy': 'random'}}],
        }
        with pytest.raises(ScenarioError, match="strategy"):
            ScenarioRunner(service).run(data)

    def test_operation_must_be_single_key(self, service):
        with pytest.raises(ScenarioError, match="single-key"):
            ScenarioRunner(service).run({'operations': [{'assign': {}, 'delay': {}}]})

    def test_domain_errors_propagate(self, service):
        data = {
            'projects': [
                {'address': 'A', 'client': 'Laura', 'start': '2024-01-01', 'end': '2024-01-02',
                 'tasks': [{'title': 'Paint', 'days': 1}]},
            ],
            'operations': [
                {'finish_task': {'project': 1, 'task': 'Paint'}},
                {'finish_project': {'project': 1, 'end': '2024-01-02'}},
                {'add_task': {'project': 1, 'title': 'Tile', 'days': 1}},
            ],
        }
        with pytest.raises(ProjectFinishedError):
            ScenarioRunner(service).run(data)

    def test_load_rejects_non_mapping(self, tmp_path):
        path = tmp_path / "scenario.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ScenarioError):
            ScenarioRunner.load(path)
