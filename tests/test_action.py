"""
Test suite for the action model and its canonical serialization
"""

import itertools
from datetime import datetime, timezone, timedelta
from urllib.parse import parse_qsl

import pytest

from netstorage_sdk.signing import (
    Action,
    ACTION_PARAMETERS,
    PROTOCOL_VERSION,
    QUICK_DELETE_CONFIRMATION,
    builders,
    serialize_action,
    convert_map_as_query_params,
    format_default,
    format_timestamp,
    format_bytes,
    format_flag,
)
from netstorage_sdk.exceptions import ValidationError, ErrorCodes

MTIME = 1384128000
LOREM_IPSUM = b"Lorem ipsum"
LOREM_IPSUM_HEX = "4c6f72656d20697073756d"


class TestFormatters:
    """Test parameter value formatters"""

    def test_format_default(self):
        assert format_default(None) is None
        assert format_default("xml") == "xml"
        assert format_default(123) == "123"

    def test_format_timestamp_aware(self):
        assert format_timestamp(datetime(2013, 11, 11, tzinfo=timezone.utc)) == str(MTIME)

    def test_format_timestamp_naive_is_utc(self):
        assert format_timestamp(datetime(2013, 11, 11)) == str(MTIME)

    def test_format_timestamp_other_zone(self):
        tz = timezone(timedelta(hours=2))
        assert format_timestamp(datetime(2013, 11, 11, 2, 0, 0, tzinfo=tz)) == str(MTIME)

    def test_format_timestamp_truncates(self):
        value = datetime(2013, 11, 11, 0, 0, 0, 999999, tzinfo=timezone.utc)
        assert format_timestamp(value) == str(MTIME)
        assert format_timestamp(MTIME + 0.9) == str(MTIME)
        assert format_timestamp(MTIME) == str(MTIME)

    def test_format_timestamp_none(self):
        assert format_timestamp(None) is None

    def test_format_bytes(self):
        assert format_bytes(None) is None
        assert format_bytes(LOREM_IPSUM) == LOREM_IPSUM_HEX
        assert format_bytes(b"\x00\xff") == "00ff"

    def test_format_flag(self):
        """Only true produces a value; there is no false encoding"""
        assert format_flag(True) == "1"
        assert format_flag(False) is None
        assert format_flag(None) is None


class TestAction:
    """Test action construction and validation"""

    def test_empty_action_rejected(self):
        with pytest.raises(ValidationError, match="action cannot be empty"):
            Action("")

    def test_version_is_fixed(self):
        assert Action("download").version == PROTOCOL_VERSION == 1

    def test_constructor_keywords(self):
        action = Action("stat", format="xml")
        assert action.format == "xml"
        assert action.get("format") == "xml"
        assert action.size is None

    def test_unknown_parameter(self):
        with pytest.raises(ValidationError, match="Unknown action parameter"):
            Action("stat", colour="blue")
        with pytest.raises(AttributeError):
            Action("stat").colour

    @pytest.mark.parametrize("field,value", [
        ("format", 1),
        ("mtime", "yesterday"),
        ("mtime", True),
        ("mtime", float("nan")),
        ("mtime", float("inf")),
        ("mtime", float("-inf")),
        ("size", "123"),
        ("size", True),
        ("size", -1),
        ("md5", "00"),
        ("index_zip", 1),
    ])
    def test_wrong_types_rejected(self, field, value):
        with pytest.raises(ValidationError) as exc_info:
            Action("upload").set(field, value)
        assert exc_info.value.details["field"] == field

    def test_non_finite_mtime_rejected(self):
        with pytest.raises(ValidationError, match="mtime must be a finite number"):
            builders.mtime(float("nan"))
        assert builders.mtime(1384128000.5).mtime == 1384128000.5

    def test_none_unsets(self):
        action = Action("upload").of_size(10).of_size(None)
        assert action.size is None
        assert "size" not in action.as_query_params()

    def test_additional_params_must_be_strings(self):
        with pytest.raises(ValidationError):
            Action("setmd").with_additional_params({"hdr_X-rob": 2})

    def test_parameter_table(self):
        wire_names = {spec.field: spec.wire_name for spec in ACTION_PARAMETERS}
        assert wire_names["quick_delete"] == "quick-delete"
        assert wire_names["index_zip"] == "index-zip"
        assert not any(spec.include_null for spec in ACTION_PARAMETERS)

    def test_equality(self):
        assert builders.stat("xml") == Action("stat", format="xml")
        assert builders.stat("xml") != builders.stat("json")


class TestSizeAndIndexZip:
    """A declared size never coexists with index-zip"""

    def test_size_then_index_zip(self):
        action = builders.upload().of_size(123).with_index_zip(True)
        assert action.size is None
        assert action.index_zip is True

    def test_index_zip_then_size(self):
        action = builders.upload().with_index_zip(True).of_size(123)
        assert action.size is None

    def test_index_zip_false_keeps_size(self):
        action = builders.upload().of_size(123).with_index_zip(False)
        assert action.size == 123
        assert action.index_zip is None

    def test_serialized_forms(self):
        zipped = builders.upload().with_mtime(MTIME).of_size(123).with_index_zip(True)
        assert serialize_action(zipped) == f"action=upload&index-zip=1&mtime={MTIME}&version=1"

        plain = builders.upload().with_mtime(MTIME).of_size(123).with_index_zip(False)
        assert serialize_action(plain) == f"action=upload&mtime={MTIME}&size=123&version=1"


class TestSealing:
    """Actions freeze once serialized"""

    def test_serialization_seals(self):
        action = builders.upload().of_size(10)
        assert not action.sealed
        serialize_action(action)
        assert action.sealed

    @pytest.mark.parametrize("mutate", [
        lambda a: a.of_size(20),
        lambda a: a.with_index_zip(True),
        lambda a: a.with_additional_params({"a": "b"}),
        lambda a: a.set("format", "xml"),
    ])
    def test_mutation_after_seal(self, mutate):
        action = builders.upload().of_size(10)
        action.as_query_params()
        with pytest.raises(ValidationError) as exc_info:
            mutate(action)
        assert exc_info.value.error_code == ErrorCodes.ACTION_SEALED

    def test_reserialization_is_stable(self):
        action = builders.upload().with_sha256(LOREM_IPSUM)
        assert serialize_action(action) == serialize_action(action)


class TestCanonicalSerialization:
    """Test the canonical action query string"""

    def test_quick_delete(self):
        assert serialize_action(builders.quick_delete()) == \
            "action=quick-delete&quick-delete=imreallyreallysure&version=1"
        assert builders.quick_delete().quick_delete == QUICK_DELETE_CONFIRMATION

    def test_symlink(self):
        assert serialize_action(builders.symlink("/bar")) == "action=symlink&target=%2Fbar&version=1"

    def test_stat(self):
        assert serialize_action(builders.stat("xml")) == "action=stat&format=xml&version=1"

    def test_rename(self):
        assert serialize_action(builders.rename("/foo")) == "action=rename&destination=%2Ffoo&version=1"

    def test_download(self):
        assert serialize_action(builders.download()) == "action=download&version=1"

    def test_checksums(self):
        action = builders.upload().with_md5(LOREM_IPSUM).with_sha1(LOREM_IPSUM).with_sha256(LOREM_IPSUM)
        assert serialize_action(action) == (
            f"action=upload&md5={LOREM_IPSUM_HEX}&sha1={LOREM_IPSUM_HEX}"
            f"&sha256={LOREM_IPSUM_HEX}&version=1"
        )

    def test_setmd(self):
        action = builders.setmd({"hdr_X-rob": "hello2"})
        assert serialize_action(action) == "action=setmd&hdr_X-rob=hello2&version=1"

    def test_full_upload(self):
        action = (builders.upload()
                  .with_md5(b"\x00")
                  .with_sha1(b"\x01")
                  .with_sha256(b"\x02")
                  .with_mtime(datetime(2013, 11, 11, tzinfo=timezone.utc))
                  .of_size(73))
        assert serialize_action(action) == \
            "action=upload&md5=00&mtime=1384128000&sha1=01&sha256=02&size=73&version=1"

    def test_builders_without_parameters(self):
        for name, build in (("delete", builders.delete), ("mkdir", builders.mkdir),
                            ("rmdir", builders.rmdir), ("upload", builders.upload)):
            assert serialize_action(build()) == f"action={name}&version=1"

    def test_dir_and_du(self):
        assert serialize_action(builders.dir_("xml")) == "action=dir&format=xml&version=1"
        assert serialize_action(builders.du("xml")) == "action=du&format=xml&version=1"

    def test_mtime(self):
        assert serialize_action(builders.mtime(MTIME)) == f"action=mtime&mtime={MTIME}&version=1"

    def test_convert_map(self):
        assert convert_map_as_query_params({"name": "value", "name2": "value 2"}) == "name=value&name2=value+2"

    def test_additional_params_override(self):
        action = builders.stat("xml").with_additional_params({"format": "json"})
        assert serialize_action(action) == "action=stat&format=json&version=1"

    def test_keys_sorted(self):
        action = (builders.upload()
                  .with_additional_params({"zeta": "1", "Alpha": "2", "hdr_a b": "c d"})
                  .with_mtime(MTIME)
                  .of_size(5)
                  .with_md5(b"\x10"))
        serialized = serialize_action(action)
        keys = [key for key, _ in parse_qsl(serialized)]
        assert keys == sorted(keys)
        assert "hdr_a+b=c+d" in serialized

    def test_order_independent(self):
        """Every order of populating the same fields yields the same string"""
        setters = [
            lambda a: a.with_mtime(MTIME),
            lambda a: a.of_size(73),
            lambda a: a.with_md5(b"\x00"),
            lambda a: a.with_sha256(b"\x02"),
            lambda a: a.with_additional_params({"hdr_b": "2", "hdr_a": "1"}),
        ]
        results = set()
        for order in itertools.permutations(setters):
            action = builders.upload()
            for setter in order:
                setter(action)
            results.add(serialize_action(action))
        assert len(results) == 1
