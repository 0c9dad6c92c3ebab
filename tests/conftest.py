"""Shared pytest fixtures."""

from collections.abc import Iterator

import pytest

from kwery import Client, create_kwery, reset_default_client


@pytest.fixture(autouse=True)
def default_client() -> Iterator[None]:
    """Start and finish every test without a default client."""
    reset_default_client()
    yield
    reset_default_client()


@pytest.fixture
def queries() -> dict:
    """Create common synchronous queries for tests."""
    return {
        "requests": lambda: "hello all",
        "request": lambda id: f"hello {id}",
        "clients": lambda: "this is a client",
    }


@pytest.fixture
def mutations() -> dict:
    """Create common synchronous mutations for tests."""
    return {
        "create_request": lambda input: input,
        "update_request": lambda id, input: {**input, "id": id},
    }


@pytest.fixture
def client(queries: dict, mutations: dict) -> Client:
    """Create a fresh client for each test."""
    return create_kwery(queries=queries, mutations=mutations)
