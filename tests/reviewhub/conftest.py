import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def reviewhub_bed():
    from reviewhub.domain import reviewhub

    bed = DomainFixture(reviewhub)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(reviewhub_bed, monkeypatch):
    monkeypatch.delenv("REVIEWHUB_INITIAL_REVIEW_STATUS", raising=False)
    monkeypatch.delenv("REVIEWHUB_ALLOW_SELF_VOTE", raising=False)

    with reviewhub_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def roles():
    """Seed the built-in roles; ``{kind: role_id}``."""
    from reviewhub.role.seeding import seed_builtin_roles

    return seed_builtin_roles()


@pytest.fixture()
def make_account(roles):
    """Register an account on the given built-in kind or explicit role id."""
    from protean import current_domain

    from reviewhub.account.account import Account
    from reviewhub.account.management import RegisterAccount

    def _make(user_id, kind="user", role_id=None):
        current_domain.process(
            RegisterAccount(user_id=user_id, email=f"{user_id}@example.com"),
            asynchronous=False,
        )
        target = role_id or roles[kind]
        repo = current_domain.repository_for(Account)
        account = repo.get(user_id)
        if str(account.role_id) != str(target):
            account.assign_role(target)
            repo.add(account)
        return user_id

    return _make


@pytest.fixture()
def admin(make_account):
    return make_account("admin-1", kind="admin")


@pytest.fixture()
def member(make_account):
    return make_account("user-1", kind="user")
