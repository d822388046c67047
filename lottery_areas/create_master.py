from sqlalchemy import select

from lottery_areas.core.db import SessionLocal
from lottery_areas.models.user import ROLE_MASTER, User


def main():
    with SessionLocal() as session:
        existing = session.scalar(select(User.id).where(User.role == ROLE_MASTER).limit(1))
        if existing:
            print("Já existe um usuário MASTER. Abortando.")
            return
        username = input("Usuário master: ").strip()
        name = input("Nome: ").strip()
        if not username:
            print("Usuário é obrigatório.")
            return
        if session.scalar(select(User.id).where(User.username == username)):
            print("Usuário já existe.")
            return
        user = User(username=username, name=name or "Master", role=ROLE_MASTER, company_id=None, is_active=True)
        session.add(user)
        session.commit()
        print(f"Usuário MASTER criado (id={user.id}). Use o cabeçalho X-User-Id nas requisições.")


if __name__ == "__main__":
    main()
