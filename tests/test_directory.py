"""Integration tests for echos.services.directory and echos.services.users on SQLite."""

import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from echos.core.errors import AlreadyExistsError, MalformedInputError, NotFoundError
from echos.core.security import verify_password
from echos.models import Base, User
from echos.schemas.users import UserQuery
from echos.services import users as user_ops
from echos.services.directory import UserDirectory


def _session_factory() -> sessionmaker:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False)


def _record(pseudonyme: str, **kwargs: object) -> dict:
    data = {"pseudonyme": pseudonyme, "password_hash": "$2b$04$stub", "role": "user"}
    data.update(kwargs)
    return data


class DirectoryTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.session = _session_factory()()
        self.directory = UserDirectory(self.session)

    def tearDown(self) -> None:
        self.session.close()


class TestCreateAndFind(DirectoryTestCase):
    """create assigns an id; find_one looks records up by identity fields."""

    def test_create_assigns_id_and_defaults(self) -> None:
        user = self.directory.create(_record("alice", name="Alice"))
        self.assertTrue(user.id)
        self.assertEqual(user.role, "user")
        self.assertIsNotNone(user.created_at)
        self.assertEqual(self.directory.find_one(id=user.id).pseudonyme, "alice")
        self.assertEqual(self.directory.find_one(pseudonyme="alice").id, user.id)

    def test_duplicate_pseudonyme_rejected_by_index(self) -> None:
        self.directory.create(_record("alice"))
        with self.assertRaises(AlreadyExistsError):
            self.directory.create(_record("alice"))
        self.assertEqual(self.session.query(User).count(), 1)

    def test_raw_password_is_refused(self) -> None:
        with self.assertRaises(ValueError):
            self.directory.create({"pseudonyme": "bob", "password": "Secret1!"})

    def test_find_one_requires_filter(self) -> None:
        with self.assertRaises(ValueError):
            self.directory.find_one()

    def test_address_round_trip_and_projection(self) -> None:
        user = self.directory.create(
            _record("carol", address={"city": "Paris", "country": "FR"})
        )
        projection = UserDirectory.project(user)
        self.assertEqual(
            projection["address"], {"street": None, "city": "Paris", "country": "FR"}
        )
        self.assertNotIn("password_hash", projection)

    def test_projection_without_address(self) -> None:
        user = self.directory.create(_record("dave"))
        self.assertIsNone(UserDirectory.project(user)["address"])


class TestUpdateAndRemove(DirectoryTestCase):
    def test_update_returns_updated_record(self) -> None:
        user = self.directory.create(_record("alice"))
        updated = self.directory.update({"id": user.id}, {"comment": "hello"})
        self.assertEqual(updated.comment, "hello")

    def test_update_missing_returns_none(self) -> None:
        self.assertIsNone(self.directory.update({"id": "missing"}, {"comment": "x"}))

    def test_update_to_taken_pseudonyme(self) -> None:
        self.directory.create(_record("alice"))
        bob = self.directory.create(_record("bob"))
        with self.assertRaises(AlreadyExistsError):
            self.directory.update({"id": bob.id}, {"pseudonyme": "alice"})

    def test_remove_is_hard_delete(self) -> None:
        user_id = self.directory.create(_record("alice")).id
        self.assertEqual(self.directory.remove({"id": user_id}), 1)
        self.assertIsNone(self.directory.find_one(id=user_id))
        self.assertIsNone(self.directory.find_one(pseudonyme="alice"))
        self.assertEqual(self.session.query(User).count(), 0)

    def test_remove_missing_returns_zero(self) -> None:
        self.directory.create(_record("alice"))
        self.assertEqual(self.directory.remove({"id": "missing"}), 0)
        self.assertEqual(self.session.query(User).count(), 1)

    def test_delete_user_then_lookup(self) -> None:
        user_id = self.directory.create(_record("alice")).id
        self.assertEqual(user_ops.delete_user(self.directory, user_id), 1)
        with self.assertRaises(NotFoundError):
            user_ops.get_profile(self.directory, user_id)


class TestFindAll(DirectoryTestCase):
    """find_all paginates, sorts and filters by search text."""

    def setUp(self) -> None:
        super().setUp()
        self.directory.create(_record("anna", name="Anna", address={"city": "Lyon"}))
        self.directory.create(_record("bruno", name="Bruno", comment="likes jazz"))
        self.directory.create(_record("chloe", name="Chloe", address={"city": "Nice"}))
        self.directory.create(_record("denis", name="Denis", role="admin"))

    def _pseudonymes(self, **query: object) -> list[str]:
        return [u.pseudonyme for u in self.directory.find_all(UserQuery(**query))]

    def test_sort_ascending_and_descending(self) -> None:
        self.assertEqual(
            self._pseudonymes(property_sort="pseudonyme"),
            ["anna", "bruno", "chloe", "denis"],
        )
        self.assertEqual(
            self._pseudonymes(property_sort="pseudonyme", direction_sort=-1),
            ["denis", "chloe", "bruno", "anna"],
        )

    def test_pagination(self) -> None:
        self.assertEqual(
            self._pseudonymes(property_sort="pseudonyme", limit=2, page=2),
            ["chloe", "denis"],
        )
        self.assertEqual(self._pseudonymes(property_sort="pseudonyme", limit=2, page=3), [])

    def test_text_search_any_term_any_field(self) -> None:
        self.assertEqual(
            self._pseudonymes(text="jazz Lyon", property_sort="pseudonyme"),
            ["anna", "bruno"],
        )

    def test_text_search_escapes_wildcards(self) -> None:
        self.assertEqual(self._pseudonymes(text="%"), [])


class TestProfileOperations(DirectoryTestCase):
    """echos.services.users: hashing on update, NotFound on misses."""

    def test_update_profile_hashes_password(self) -> None:
        user = self.directory.create(_record("alice"))
        profile = user_ops.update_profile(
            self.directory, user.id, {"password": "Secret1!", "pseudonyme": "ALICIA"}
        )
        self.assertEqual(profile["pseudonyme"], "alicia")
        stored = self.directory.find_one(id=user.id)
        self.assertTrue(verify_password("Secret1!", stored.password_hash))

    def test_update_profile_keeps_required_fields(self) -> None:
        user = self.directory.create(_record("alice", name="Alice"))
        profile = user_ops.update_profile(
            self.directory, user.id, {"pseudonyme": None, "role": None, "name": None}
        )
        self.assertEqual(profile["pseudonyme"], "alice")
        self.assertEqual(profile["role"], "user")
        self.assertIsNone(profile["name"])

    def test_update_profile_rejects_blank_pseudonyme(self) -> None:
        user = self.directory.create(_record("alice"))
        with self.assertRaises(MalformedInputError):
            user_ops.update_profile(self.directory, user.id, {"pseudonyme": "  "})
        self.assertEqual(self.directory.find_one(id=user.id).pseudonyme, "alice")

    def test_missing_user(self) -> None:
        with self.assertRaises(NotFoundError):
            user_ops.get_profile(self.directory, "missing")
        with self.assertRaises(NotFoundError):
            user_ops.update_profile(self.directory, "missing", {"comment": "x"})
        with self.assertRaises(NotFoundError):
            user_ops.delete_user(self.directory, "missing")

    def test_delete_user(self) -> None:
        user = self.directory.create(_record("alice"))
        self.assertEqual(user_ops.delete_user(self.directory, user.id), 1)

    def test_list_users_projects(self) -> None:
        self.directory.create(_record("alice"))
        users = user_ops.list_users(self.directory, UserQuery())
        self.assertEqual(len(users), 1)
        self.assertNotIn("password_hash", users[0])


if __name__ == "__main__":
    unittest.main()
