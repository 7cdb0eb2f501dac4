from taskmaster.context import Context
from taskmaster.repositories import ContextRepository

from conftest import make_list


def _repo(*entities):
    return ContextRepository(Context(entities))


class TestGet:
    def test_get_returns_none_for_unknown_id(self):
        repo = _repo(make_list("1"))
        assert repo.get("missing") is None

    def test_get_returns_first_match(self):
        a = make_list("1")
        repo = _repo(a, make_list("2"))
        assert repo.get("1") is a

    def test_get_all_preserves_insertion_order(self):
        entities = [make_list(str(i)) for i in range(4)]
        repo = _repo(*entities)
        assert [e.id for e in repo.get_all()] == ["0", "1", "2", "3"]


class TestInsert:
    def test_insert_into_empty_context(self):
        repo = _repo()
        a = make_list("1")

        assert repo.insert(a) is None
        assert repo.get_all() == [a]
        assert repo.get("1") == a

    def test_insert_existing_id_returns_stored_value_and_changes_nothing(self):
        stored = make_list("1", revision=0)
        repo = _repo(stored)

        result = repo.insert(make_list("1", revision=7))

        assert result is stored
        assert repo.get_all() == [stored]
        assert repo.get("1").revision == 0


class TestUpdate:
    def test_update_returns_previous_and_replaces(self):
        original = make_list("1", revision=0)
        repo = _repo(make_list("0"), original, make_list("2"))

        newer = original.model_copy(update={"revision": 1})
        previous = repo.update(newer)

        assert previous is original
        assert previous.revision == 0
        assert repo.get("1").revision == 1
        # replaced in place, order kept
        assert [e.id for e in repo.get_all()] == ["0", "1", "2"]

    def test_update_unknown_id_is_a_no_op(self):
        a = make_list("1")
        repo = _repo(a)

        assert repo.update(make_list("2")) is None
        assert repo.get_all() == [a]


class TestUpsert:
    def test_upsert_existing_behaves_like_update(self):
        original = make_list("1", revision=0)
        repo = _repo(original)

        newer = original.model_copy(update={"revision": 1})
        assert repo.upsert(newer) is original
        assert repo.get_all() == [newer]

    def test_upsert_new_behaves_like_insert(self):
        a = make_list("1")
        repo = _repo(a)
        b = make_list("2")

        assert repo.upsert(b) is None
        assert repo.get_all() == [a, b]


class TestDelete:
    def test_delete_returns_removed_value(self):
        a, b = make_list("1"), make_list("2")
        repo = _repo(a, b)

        assert repo.delete("1") is a
        assert repo.get_all() == [b]
        assert repo.get("1") is None

    def test_delete_unknown_id_leaves_context_unchanged(self):
        a = make_list("1")
        repo = _repo(a)

        assert repo.delete("2") is None
        assert repo.get_all() == [a]


def test_repository_writes_through_to_its_context():
    context = Context()
    repo = ContextRepository(context)
    repo.insert(make_list("1"))
    assert len(context) == 1
    assert repo.context is context


def test_get_all_returns_new_list_object():
    repo = _repo(make_list("1"))
    snapshot = repo.get_all()
    snapshot.clear()
    assert len(repo.get_all()) == 1
