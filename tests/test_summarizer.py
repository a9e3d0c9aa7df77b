"""
Tests for the node summarizer

- Short text used verbatim, long text sent to the LLM
- summary on leaves, prefix_summary on internal nodes
- Concurrent fan-out, all-or-nothing write-back on failure
- Document description prompt content
"""

import asyncio
import json

import pytest
from unittest.mock import AsyncMock

from mdindex.pageindex.models import TreeNode
from mdindex.pageindex.summarizer import (
    generate_doc_description,
    generate_summaries_for_structure,
    get_node_summary,
)


def _sample_tree() -> list[TreeNode]:
    return [
        TreeNode(
            title="Guide",
            node_id="0000",
            text="# Guide\nintro",
            children=[
                TreeNode(title="Install", node_id="0001", text="## Install\npip"),
                TreeNode(title="Usage", node_id="0002", text="## Usage\nrun"),
            ],
        )
    ]


# ──────────────────────────────────────────────────────────────
# get_node_summary
# ──────────────────────────────────────────────────────────────


class TestGetNodeSummary:
    """Tests for single-node summaries."""

    @pytest.mark.asyncio
    async def test_short_text_returned_verbatim(self) -> None:
        llm = AsyncMock(return_value="unused")
        node = TreeNode(title="A", text="# A\nshort")
        assert await get_node_summary(node, 200, llm) == "# A\nshort"
        llm.assert_not_called()

    @pytest.mark.asyncio
    async def test_long_text_sent_to_llm(self) -> None:
        llm = AsyncMock(return_value="A paragraph.")
        text = "# A\n" + "word " * 200
        node = TreeNode(title="A", text=text)

        assert await get_node_summary(node, 10, llm) == "A paragraph."
        llm.assert_awaited_once()
        prompt = llm.await_args.args[0]
        assert text in prompt

    @pytest.mark.asyncio
    async def test_missing_text_treated_as_empty(self) -> None:
        llm = AsyncMock()
        assert await get_node_summary(TreeNode(title="A"), 1, llm) == ""
        llm.assert_not_called()


# ──────────────────────────────────────────────────────────────
# generate_summaries_for_structure
# ──────────────────────────────────────────────────────────────


class TestGenerateSummaries:
    """Tests for whole-tree summarization."""

    @pytest.mark.asyncio
    async def test_leaf_and_internal_fields(self) -> None:
        tree = _sample_tree()

        async def fake_llm(prompt: str) -> str:
            for title in ("Guide", "Install", "Usage"):
                if f"# {title}\n" in prompt:
                    return f"summary of {title}"
            return "?"

        nodes = await generate_summaries_for_structure(tree, 0, fake_llm)

        assert [n.title for n in nodes] == ["Guide", "Install", "Usage"]
        root = tree[0]
        assert root.prefix_summary == "summary of Guide"
        assert root.summary is None
        for child in root.children:
            assert child.summary == f"summary of {child.title}"
            assert child.prefix_summary is None

    @pytest.mark.asyncio
    async def test_requests_run_concurrently(self) -> None:
        in_flight = 0
        peak = 0

        async def slow_llm(prompt: str) -> str:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return "ok"

        await generate_summaries_for_structure(_sample_tree(), 0, slow_llm)
        assert peak == 3

    @pytest.mark.asyncio
    async def test_failure_propagates_and_writes_nothing(self) -> None:
        tree = _sample_tree()

        async def flaky_llm(prompt: str) -> str:
            if "Usage" in prompt:
                raise RuntimeError("model unavailable")
            return "fine"

        with pytest.raises(RuntimeError, match="model unavailable"):
            await generate_summaries_for_structure(tree, 0, flaky_llm)

        root = tree[0]
        assert root.prefix_summary is None
        assert all(c.summary is None for c in root.children)

    @pytest.mark.asyncio
    async def test_below_threshold_uses_text(self) -> None:
        llm = AsyncMock()
        tree = _sample_tree()
        await generate_summaries_for_structure(tree, 200, llm)
        llm.assert_not_called()
        assert tree[0].prefix_summary == "# Guide\nintro"
        assert tree[0].children[1].summary == "## Usage\nrun"

    @pytest.mark.asyncio
    async def test_empty_structure(self) -> None:
        llm = AsyncMock()
        assert await generate_summaries_for_structure([], 0, llm) == []


# ──────────────────────────────────────────────────────────────
# generate_doc_description
# ──────────────────────────────────────────────────────────────


class TestDocDescription:
    """Tests for the one-sentence document description."""

    @pytest.mark.asyncio
    async def test_prompt_embeds_every_node(self) -> None:
        tree = _sample_tree()
        tree[0].prefix_summary = "root"
        tree[0].children[0].summary = "install steps"
        llm = AsyncMock(return_value="A short guide.")

        description = await generate_doc_description(tree, llm)

        assert description == "A short guide."
        prompt = llm.await_args.args[0]
        payload = prompt.split("Document Structure: ", 1)[1].split("\n", 1)[0]
        assert json.loads(payload) == [
            {"title": "Guide", "node_id": "0000", "prefix_summary": "root"},
            {"title": "Install", "node_id": "0001", "summary": "install steps"},
            {"title": "Usage", "node_id": "0002"},
        ]
        assert "intro" not in prompt
