from sqlalchemy import select

from lottery_areas import create_master
from lottery_areas.models.user import ROLE_MASTER, User


def _answers(monkeypatch, *values):
    replies = iter(values)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(replies))


def test_creates_first_master(session_factory, monkeypatch, capsys):
    monkeypatch.setattr(create_master, "SessionLocal", session_factory)
    _answers(monkeypatch, "root", "Plataforma")

    create_master.main()

    with session_factory() as session:
        user = session.scalar(select(User).where(User.username == "root"))
    assert user.role == ROLE_MASTER
    assert user.company_id is None
    assert "MASTER criado" in capsys.readouterr().out


def test_refuses_when_master_exists(session_factory, seed, monkeypatch, capsys):
    monkeypatch.setattr(create_master, "SessionLocal", session_factory)
    _answers(monkeypatch)

    create_master.main()

    assert "Abortando" in capsys.readouterr().out
