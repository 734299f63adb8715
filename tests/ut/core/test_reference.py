"""来源引用解析测试"""

import pytest

from chartlock.core.exceptions import InvalidReference
from chartlock.core.reference import Reference, parse_reference


class TestParseReference:
    @pytest.mark.parametrize(("ref", "repo", "tag"), [
        ("mychart", "mychart", ""),
        ("mychart:1.5.0", "mychart", "1.5.0"),
        ("myrepo/mychart", "myrepo/mychart", ""),
        ("myrepo/mychart:1.5.0", "myrepo/mychart", "1.5.0"),
        ("mychart:5001:1.5.0", "mychart:5001", "1.5.0"),
        ("myrepo:5001/mychart:1.5.0", "myrepo:5001/mychart", "1.5.0"),
        ("localhost:5000/mychart:latest", "localhost:5000/mychart", "latest"),
        ("localhost:5000/mychart", "localhost:5000/mychart", ""),
        ("my.host.com/my/nested/repo:1.2.3", "my.host.com/my/nested/repo", "1.2.3"),
    ])
    def test_good_refs(self, ref: str, repo: str, tag: str) -> None:
        assert parse_reference(ref) == Reference(repo=repo, tag=tag)

    def test_empty_ref(self) -> None:
        with pytest.raises(InvalidReference, match="为空"):
            parse_reference("")

    @pytest.mark.parametrize(("ref", "count"), [
        ("my:bad:ref", 2),
        ("my:really:bad:ref", 3),
        ("host:5000/a:b:c", 3),
    ])
    def test_too_many_colons(self, ref: str, count: int) -> None:
        with pytest.raises(InvalidReference, match=rf"\({count}\)") as info:
            parse_reference(ref)
        assert info.value.ref == ref

    def test_non_ascii_digits_not_a_port(self) -> None:
        with pytest.raises(InvalidReference):
            parse_reference("mychart:５００１:1.5.0")


class TestReference:
    def test_full_name(self) -> None:
        assert parse_reference("myrepo:5001/mychart:1.5.0").full_name == "myrepo:5001/mychart:1.5.0"
        assert str(Reference(repo="mychart")) == "mychart"
