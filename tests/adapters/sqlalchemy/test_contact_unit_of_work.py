from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from contactmerge.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyContactUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from contactmerge.domain.model import Contact, WebUser

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyContactUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_unit_of_work_commits(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyContactUnitOfWork() as uow:
        contact = Contact()
        uow.repositories.contacts.add(contact)
        uow.repositories.users.add(WebUser(user_name="alice"))
        uow.commit()

    with SqlAlchemyContactUnitOfWork() as uow:
        assert uow.repositories.contacts.get(contact.id) is not None
        assert uow.repositories.users.find_by_user_name("alice") is not None


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    contact = Contact()

    with pytest.raises(RuntimeError), SqlAlchemyContactUnitOfWork() as uow:
        uow.repositories.contacts.add(contact)
        uow.session.flush()
        raise RuntimeError("boom")

    with SqlAlchemyContactUnitOfWork() as uow:
        assert uow.repositories.contacts.get(contact.id) is None


def test_repositories_require_open_session(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyContactUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories
