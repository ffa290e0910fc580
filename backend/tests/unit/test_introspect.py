"""Tests for unwrapping validator node modifiers."""

import pytest

from docschema.core import NodeKind, unwrap, v


class TestUnwrap:
    """Test cases for the node introspector."""

    def test_plain_node(self):
        """Test a node without wrappers."""
        node = v.string()

        summary = unwrap(node)

        assert summary.base is node
        assert summary.optional is False
        assert summary.nullable is False
        assert summary.has_default is False
        assert summary.layers == (node,)

    @pytest.mark.parametrize(
        ("build", "optional", "nullable"),
        [
            (lambda n: n.optional(), True, False),
            (lambda n: n.nullable(), False, True),
            (lambda n: n.nullish(), True, True),
            (lambda n: n.optional().nullish().nullable(), True, True),
            (lambda n: n.nullable().default("x"), False, True),
            (lambda n: n.default("x").optional(), True, False),
        ],
    )
    def test_modifier_flags(self, build, optional, nullable):
        """Test that optional/nullable accumulate regardless of order."""
        base = v.string()

        summary = unwrap(build(base))

        assert summary.base is base
        assert summary.optional is optional
        assert summary.nullable is nullable

    def test_outermost_default_wins(self):
        """Test that the top-most .default() call is kept."""
        summary = unwrap(v.string().default("ignored").default("again").default("kept"))

        assert summary.has_default is True
        assert summary.default_value == "kept"

    def test_default_of_none_is_a_default(self):
        """Test that a None default is distinguished from no default."""
        summary = unwrap(v.string().nullable().default(None))

        assert summary.has_default is True
        assert summary.default_value is None

    def test_effects_are_transparent(self):
        """Test that refinements and transforms are unwrapped."""
        base = v.string()

        summary = unwrap(base.refine(bool).transform(str.upper).optional())

        assert summary.base is base
        assert summary.optional is True
        assert summary.base.kind is NodeKind.STRING

    def test_null_literal_is_nullable(self):
        """Test that literal(None) counts as nullable."""
        summary = unwrap(v.literal(None))

        assert summary.nullable is True
        assert summary.optional is False
        assert summary.is_null_literal is True

    def test_other_literals_are_not_nullable(self):
        """Test that non-null literals keep nullable unset."""
        summary = unwrap(v.literal("active"))

        assert summary.nullable is False
        assert summary.is_null_literal is False

    def test_layers_are_outermost_first(self):
        """Test that every crossed node is reported in order."""
        base = v.number()
        nullable = base.nullable()
        default = nullable.default(0)
        optional = default.optional()

        summary = unwrap(optional)

        assert summary.layers == (optional, default, nullable, base)

    def test_wrapping_does_not_modify_inner(self):
        """Test that wrapper methods return new nodes."""
        base = v.string()
        wrapped = base.optional()

        assert wrapped is not base
        assert unwrap(base).optional is False

    def test_wrapper_kinds(self):
        """Test the wrapper classification of node kinds."""
        assert NodeKind.OPTIONAL.is_wrapper
        assert NodeKind.EFFECTS.is_wrapper
        assert not NodeKind.OBJECT.is_wrapper
        assert not NodeKind.LITERAL.is_wrapper
