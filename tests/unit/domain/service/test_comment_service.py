"""Unit tests for CommentService."""

import asyncio
from uuid import uuid4

import pytest

from chorus.domain.error import NotFoundError, StorageError, ValidationError
from chorus.domain.repository import CommentRepository
from chorus.domain.service import CommentService
from chorus.domain.value import CommentId
from chorus.persistence.repository.inmemory import InMemoryCommentRepository
from tests.conftest import make_comment
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()


class RecordingCommentRepository(InMemoryCommentRepository):
    """In-memory repository that remembers the order of deletions."""

    def __init__(self) -> None:
        super().__init__()
        self.deleted_order: list[CommentId] = []

    async def delete(self, comment_id: CommentId) -> int:
        self.deleted_order.append(comment_id)
        return await super().delete(comment_id)


class FailingCommentRepository(InMemoryCommentRepository):
    """In-memory repository whose deletes start failing after a few calls."""

    def __init__(self, fail_after: int) -> None:
        super().__init__()
        self.fail_after = fail_after
        self.delete_calls = 0

    async def delete(self, comment_id: CommentId) -> int:
        self.delete_calls += 1
        if self.delete_calls > self.fail_after:
            raise StorageError("delete", "connection reset")
        return await super().delete(comment_id)


async def build_chain(repo: InMemoryCommentRepository, depth: int) -> list[CommentId]:
    """Store a single-branch thread and return its IDs from root to leaf."""
    ids: list[CommentId] = []
    parent_id = None
    for level in range(depth):
        comment = await repo.insert(
            nickname="chain", text=f"level {level}", parent_id=parent_id
        )
        ids.append(comment.id)
        parent_id = comment.id
    return ids


async def build_tree(
    repo: InMemoryCommentRepository, depth: int, fan_out: int
) -> tuple[CommentId, list[CommentId]]:
    """Store a full tree and return its root ID and all node IDs."""
    root = await repo.insert(nickname="root", text="root")
    all_ids = [root.id]
    level = [root.id]
    for _ in range(depth - 1):
        next_level = []
        for parent_id in level:
            for i in range(fan_out):
                child = await repo.insert(
                    nickname="child", text=f"reply {i}", parent_id=parent_id
                )
                next_level.append(child.id)
        all_ids.extend(next_level)
        level = next_level
    return root.id, all_ids


class TestCreateComment:
    """Tests for create_comment method."""

    @pytest.mark.asyncio
    async def test_create_comment_starts_unliked_and_unedited(self, unit_env):
        """New comments have no likes and are not marked edited."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)

        # Act
        result = await comment_service.create_comment(nickname="alice", text="hi")

        # Assert
        assert result.likes == 0
        assert result.edited is False
        assert result.parent_id is None
        assert result.nickname == "alice"
        assert result.text == "hi"

        saved = await comment_repo.find_by_id(result.id)
        assert saved == result

    @pytest.mark.asyncio
    async def test_create_reply_keeps_parent_reference(self, unit_env):
        """Replies point at their parent comment."""
        comment_service = await unit_env.get(CommentService)

        parent = await comment_service.create_comment(nickname="alice", text="hi")
        reply = await comment_service.create_comment(
            nickname="bob", text="hello", parent_id=parent.id
        )

        assert reply.parent_id == parent.id
        assert reply.id != parent.id

    @pytest.mark.asyncio
    async def test_create_reply_to_unknown_parent_is_allowed(self, unit_env):
        """The parent reference is weak; the store does not check it."""
        comment_service = await unit_env.get(CommentService)
        missing_parent = CommentId(uuid4())

        reply = await comment_service.create_comment(
            nickname="bob", text="hello", parent_id=missing_parent
        )

        assert reply.parent_id == missing_parent

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "nickname,text",
        [
            ("", "hi"),
            ("   ", "hi"),
            (None, "hi"),
            ("alice", ""),
            ("alice", "\n\t"),
            ("alice", None),
        ],
    )
    async def test_create_comment_requires_nickname_and_text(
        self, unit_env, nickname, text
    ):
        """Blank or missing fields are rejected before touching the store."""
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)

        with pytest.raises(ValidationError):
            await comment_service.create_comment(nickname=nickname, text=text)

        assert await comment_repo.count() == 0

    @pytest.mark.asyncio
    async def test_create_comment_rejects_oversized_text(self, unit_env):
        """Text longer than the column limit is a validation error."""
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(ValidationError, match="text"):
            await comment_service.create_comment(nickname="alice", text="x" * 10001)


class TestEditComment:
    """Tests for edit_comment method."""

    @pytest.mark.asyncio
    async def test_edit_overwrites_content_and_marks_edited(self, unit_env):
        """Editing replaces nickname and text and sets edited."""
        comment_service = await unit_env.get(CommentService)
        original = await comment_service.create_comment(nickname="alice", text="hi")

        updated = await comment_service.edit_comment(
            original.id, nickname="alice2", text="hi there"
        )

        assert updated.id == original.id
        assert updated.nickname == "alice2"
        assert updated.text == "hi there"
        assert updated.edited is True
        assert updated.likes == original.likes
        assert updated.created_at == original.created_at

    @pytest.mark.asyncio
    async def test_edit_unknown_comment_raises_not_found(self, unit_env):
        """Editing a missing comment fails and writes nothing."""
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)

        with pytest.raises(NotFoundError):
            await comment_service.edit_comment(
                CommentId(uuid4()), nickname="alice", text="hi"
            )

        assert await comment_repo.count() == 0

    @pytest.mark.asyncio
    async def test_edit_with_blank_text_leaves_comment_untouched(self, unit_env):
        """Validation happens before the write."""
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        original = await comment_service.create_comment(nickname="alice", text="hi")

        with pytest.raises(ValidationError):
            await comment_service.edit_comment(original.id, nickname="alice", text="")

        assert await comment_repo.find_by_id(original.id) == original


class TestToggleLike:
    """Tests for toggle_like method."""

    @pytest.mark.asyncio
    async def test_toggle_twice_restores_original_count(self, unit_env):
        """Toggle is its own inverse without interleaving."""
        comment_service = await unit_env.get(CommentService)
        comment = await comment_service.create_comment(nickname="alice", text="hi")

        liked = await comment_service.toggle_like(comment.id)
        unliked = await comment_service.toggle_like(comment.id)

        assert liked.likes == 1
        assert unliked.likes == 0

    @pytest.mark.asyncio
    async def test_toggle_decrements_positive_count(self, unit_env):
        """A comment with likes is unliked."""
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        comment = await comment_repo.save(make_comment(likes=3))

        result = await comment_service.toggle_like(comment.id)

        assert result.likes == 2

    @pytest.mark.asyncio
    async def test_likes_never_negative(self, unit_env):
        """No sequence of toggles drives the counter below zero."""
        comment_service = await unit_env.get(CommentService)
        comment = await comment_service.create_comment(nickname="alice", text="hi")

        seen = [(await comment_service.toggle_like(comment.id)).likes for _ in range(51)]

        assert min(seen) >= 0
        assert set(seen) == {0, 1}
        assert seen[-1] == 1

    @pytest.mark.asyncio
    async def test_concurrent_toggles_on_unliked_comment_cancel_out(self, unit_env):
        """Two simultaneous toggles from zero like then unlike."""
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        comment = await comment_service.create_comment(nickname="alice", text="hi")

        results = await asyncio.gather(
            comment_service.toggle_like(comment.id),
            comment_service.toggle_like(comment.id),
        )

        assert sorted(result.likes for result in results) == [0, 1]
        assert (await comment_repo.find_by_id(comment.id)).likes == 0

    @pytest.mark.asyncio
    async def test_many_concurrent_toggles_never_go_negative(self, unit_env):
        """Interleaved toggles only ever observe 0 or 1."""
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        comment = await comment_service.create_comment(nickname="alice", text="hi")

        results = await asyncio.gather(
            *(comment_service.toggle_like(comment.id) for _ in range(10))
        )

        assert all(result.likes in (0, 1) for result in results)
        assert (await comment_repo.find_by_id(comment.id)).likes == 0

    @pytest.mark.asyncio
    async def test_toggle_unknown_comment_raises_not_found(self, unit_env):
        """Liking a missing comment fails."""
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.toggle_like(CommentId(uuid4()))


class TestDeleteComment:
    """Tests for delete_comment method."""

    @pytest.mark.asyncio
    async def test_delete_unknown_comment_is_noop(self, unit_env):
        """Deleting an absent ID succeeds and deletes nothing."""
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        bystander = await comment_service.create_comment(nickname="bob", text="yo")

        deleted = await comment_service.delete_comment(CommentId(uuid4()))

        assert deleted == 0
        assert await comment_repo.find_by_id(bystander.id) is not None

    @pytest.mark.asyncio
    async def test_delete_removes_parent_child_and_grandchild(self, unit_env):
        """Deleting a root removes every descendant."""
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)

        parent = await comment_service.create_comment(nickname="p", text="parent")
        child = await comment_service.create_comment(
            nickname="c", text="child", parent_id=parent.id
        )
        grandchild = await comment_service.create_comment(
            nickname="g", text="grandchild", parent_id=child.id
        )
        unrelated = await comment_service.create_comment(nickname="u", text="other")

        deleted = await comment_service.delete_comment(parent.id)

        assert deleted == 3
        for comment in (parent, child, grandchild):
            assert await comment_repo.find_by_id(comment.id) is None
        assert await comment_repo.find_by_id(unrelated.id) is not None

    @pytest.mark.asyncio
    async def test_delete_subtree_keeps_ancestors_and_siblings(self, unit_env):
        """Only the requested node and its descendants go away."""
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)

        root = await comment_service.create_comment(nickname="r", text="root")
        left = await comment_service.create_comment(
            nickname="l", text="left", parent_id=root.id
        )
        right = await comment_service.create_comment(
            nickname="r", text="right", parent_id=root.id
        )
        left_reply = await comment_service.create_comment(
            nickname="lr", text="left reply", parent_id=left.id
        )

        deleted = await comment_service.delete_comment(left.id)

        assert deleted == 2
        assert await comment_repo.find_by_id(left.id) is None
        assert await comment_repo.find_by_id(left_reply.id) is None
        assert await comment_repo.find_by_id(root.id) is not None
        assert await comment_repo.find_by_id(right.id) is not None

    @pytest.mark.asyncio
    async def test_delete_removes_children_before_parents(self):
        """Post-order: no comment is deleted while one of its replies exists."""
        repo = RecordingCommentRepository()
        comment_service = CommentService(comment_repository=repo)
        root_id, all_ids = await build_tree(repo, depth=3, fan_out=3)
        parents = {c.id: c.parent_id for c in await repo.find_page(limit=100)}

        deleted = await comment_service.delete_comment(root_id)

        assert deleted == len(all_ids) == 13
        assert sorted(repo.deleted_order) == sorted(all_ids)
        position = {cid: i for i, cid in enumerate(repo.deleted_order)}
        for cid, parent_id in parents.items():
            if parent_id is not None:
                assert position[cid] < position[parent_id]
        assert repo.deleted_order[-1] == root_id

    @pytest.mark.asyncio
    async def test_delete_wide_tree_removes_expected_count(self):
        """Depth 4, fan-out 4: 1 + 4 + 16 + 64 comments."""
        repo = InMemoryCommentRepository()
        comment_service = CommentService(comment_repository=repo)
        root_id, all_ids = await build_tree(repo, depth=4, fan_out=4)
        survivor = await repo.insert(nickname="s", text="not in the tree")

        deleted = await comment_service.delete_comment(root_id)

        assert deleted == len(all_ids) == 85
        assert await repo.count() == 1
        assert await repo.find_by_id(survivor.id) is not None

    @pytest.mark.asyncio
    async def test_delete_deep_chain_does_not_recurse(self):
        """A 1000-level thread is deleted without hitting recursion limits."""
        repo = InMemoryCommentRepository()
        comment_service = CommentService(comment_repository=repo)
        ids = await build_chain(repo, depth=1000)

        deleted = await comment_service.delete_comment(ids[0])

        assert deleted == 1000
        assert await repo.count() == 0
        assert await repo.find_by_id(ids[-1]) is None

    @pytest.mark.asyncio
    async def test_delete_terminates_on_cyclic_parent_links(self):
        """Corrupted parent links do not make the cascade loop forever."""
        repo = InMemoryCommentRepository()
        comment_service = CommentService(comment_repository=repo)
        first_id, second_id = CommentId(uuid4()), CommentId(uuid4())
        first = make_comment(text="first", parent_id=second_id)
        await repo.save(first.model_copy(update={"id": first_id}))
        second = make_comment(text="second", parent_id=first_id)
        await repo.save(second.model_copy(update={"id": second_id}))

        deleted = await comment_service.delete_comment(first_id)

        assert deleted == 2
        assert await repo.count() == 0

    @pytest.mark.asyncio
    async def test_storage_failure_aborts_cascade_without_rollback(self):
        """The engine stops at the failing call and keeps earlier deletions."""
        repo = FailingCommentRepository(fail_after=2)
        comment_service = CommentService(comment_repository=repo)
        ids = await build_chain(repo, depth=5)

        with pytest.raises(StorageError):
            await comment_service.delete_comment(ids[0])

        # Leaf and its parent were deleted before the third delete failed
        assert await repo.find_by_id(ids[4]) is None
        assert await repo.find_by_id(ids[3]) is None
        for cid in ids[:3]:
            assert await repo.find_by_id(cid) is not None
        assert repo.delete_calls == 3


class TestListComments:
    """Tests for list_comments method."""

    @pytest.mark.asyncio
    async def test_list_returns_page_and_total(self, unit_env):
        """Listing reports the total independent of the page."""
        comment_service = await unit_env.get(CommentService)
        for i in range(7):
            await comment_service.create_comment(nickname="n", text=f"comment {i}")

        comments, total = await comment_service.list_comments(offset=5, limit=5)

        assert total == 7
        assert len(comments) == 2
