"""Tests for selector flattening."""

from flatcss.scss.optimizer import combine_selectors, optimize
from flatcss.scss.parser import Comment, Property, Rule, parse
from flatcss.scss.resolver import resolve


def flattened(source: str):
    return optimize(resolve(parse(source))).children


class TestCombineSelectors:
    def test_without_parents(self):
        assert combine_selectors(None, ["a", "b"]) == ["a", "b"]

    def test_descendants(self):
        assert combine_selectors(["a", "b"], ["c", "d"]) == ["a c", "a d", "b c", "b d"]

    def test_parent_reference(self):
        assert combine_selectors(["a"], ["&:hover", ".x &", "& + &"]) == ["a:hover", ".x a", "a + a"]


class TestFlatten:
    def test_rules_without_declarations_are_dropped(self):
        rules = flattened("div { span { img { strong { font-weight: bold } color: blue } } }")
        assert [rule.selectors for rule in rules] == [["div span img"], ["div span img strong"]]
        assert str(rules[0].children[0].name) == "color"
        assert str(rules[1].children[0].name) == "font-weight"

    def test_parent_comes_before_children(self):
        rules = flattened("a { x: 1; b { y: 2; } z: 3; }")
        assert rules[0].selectors == ["a"]
        assert [str(child.name) for child in rules[0].children] == ["x", "z"]
        assert rules[1].selectors == ["a b"]

    def test_cross_product(self):
        rules = flattened("a, b { c, d { x: 1 } }")
        assert rules[0].selectors == ["a c", "a d", "b c", "b d"]

    def test_parent_reference(self):
        rules = flattened("a { &:hover, .x & { y: 1 } }")
        assert rules[0].selectors == ["a:hover", ".x a"]

    def test_no_nested_rules_remain(self):
        for rule in flattened("a { x: 1; b { y: 2; c { z: 3; } } }"):
            assert all(isinstance(child, (Property, Comment)) for child in rule.children)

    def test_depth_counts_emitted_ancestors(self):
        rules = flattened("a { x: 1; b { c { y: 2; d { z: 3; } } } }")
        assert [(rule.selectors, rule.depth) for rule in rules] == [
            (["a"], 0),
            (["a b c"], 1),
            (["a b c d"], 2),
        ]

    def test_comment_keeps_a_rule(self):
        rules = flattened("a { /* note */ b { x: 1; } }")
        assert rules[0] == Rule(["a"], [Comment("/* note */")], 0)

    def test_top_level_comments_keep_their_place(self):
        nodes = flattened("/* one */ a { x: 1; } /* two */ b { y: 1; }")
        assert [type(node) for node in nodes] == [Comment, Rule, Comment, Rule]
