"""Pytest configuration and shared fixtures."""

import os
from collections.abc import Generator

import pytest

# Set test environment
os.environ.setdefault("ATOMIZER_DEBUG", "true")
os.environ.setdefault("ATOMIZER_LOG_LEVEL", "DEBUG")


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Generator:
    """Provide settings that log into a temporary directory."""
    from atomizer.core.config import clear_settings_cache, get_settings

    monkeypatch.setenv("ATOMIZER_LOG_DIR", str(tmp_path / "logs"))
    clear_settings_cache()

    yield get_settings()

    clear_settings_cache()


@pytest.fixture
def make_task():
    """Factory for Task records with sensible defaults."""
    from atomizer.decomposition.models import Task

    def factory(task_id: str, minutes: int | str = 30, **kwargs) -> Task:
        kwargs.setdefault("title", f"Task {task_id}")
        return Task(id=task_id, estimated_time=minutes, **kwargs)

    return factory


@pytest.fixture
def make_edge():
    """Factory for DependencyEdge records."""
    from atomizer.decomposition.models import DependencyEdge

    def factory(task_id: str, *depends_on: str, reason: str = "") -> DependencyEdge:
        return DependencyEdge(task_id=task_id, depends_on=depends_on, reason=reason)

    return factory


@pytest.fixture
def abc_tasks(make_task) -> list:
    """A(10), B(20, depends on A), C(5, depends on A)."""
    return [
        make_task("A", "10min"),
        make_task("B", "20min"),
        make_task("C", "5min"),
    ]


@pytest.fixture
def abc_edges(make_edge) -> list:
    return [make_edge("B", "A"), make_edge("C", "A")]


@pytest.fixture
def sample_payload() -> dict:
    """Provide a payload in the wire format emitted by the generation step."""
    return {
        "project": {
            "title": "Todo API",
            "complexity": "medium",
            "estimatedDuration": "1-2 days",
            "techStack": ["Node.js", "SQLite", "Docker"],
        },
        "tasks": [
            {
                "id": "task_1",
                "title": "Initialize project",
                "description": "Set up package.json and folder structure",
                "dockerCommand": "npm init -y",
                "requiredFiles": [],
                "outputFiles": ["package.json"],
                "estimatedTime": "15min",
                "estimatedCost": "0.01",
                "complexity": "low",
                "category": "setup",
            },
            {
                "id": "task_2",
                "title": "Create database schema",
                "description": "Define the todos table",
                "dockerCommand": "node scripts/migrate.js",
                "estimatedTime": "30min",
                "estimatedCost": "0.1",
                "complexity": "medium",
                "category": "development",
            },
            {
                "id": "task_3",
                "title": "Implement JWT auth",
                "description": "Login and token verification middleware",
                "dockerCommand": "npm run build",
                "estimatedTime": "1hour",
                "estimatedCost": "$0.10",
                "complexity": "high",
                "category": "development",
            },
            {
                "id": "task_4",
                "title": "Write API tests",
                "description": "Cover CRUD endpoints",
                "dockerCommand": "npm test",
                "estimatedTime": "2hours",
                "estimatedCost": 0.05,
                "complexity": "medium",
                "category": "testing",
            },
        ],
        "dependencies": [
            {"taskId": "task_2", "dependsOn": ["task_1"], "reason": "Needs package.json"},
            {"taskId": "task_3", "dependsOn": ["task_1"], "reason": "Needs package.json"},
            {
                "taskId": "task_4",
                "dependsOn": ["task_2", "task_3"],
                "reason": "Tests need schema and auth",
            },
        ],
    }


# Markers
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
