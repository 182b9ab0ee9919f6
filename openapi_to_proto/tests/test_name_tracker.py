from unittest import TestCase

import pytest

from openapi_to_proto.analyzer.name_tracker import NameTracker


class TestNameTracker(TestCase):
    """Unique name allocation"""

    def test_first_request_is_unchanged(self):
        tracker = NameTracker()
        self.assertEqual(tracker.unique_name("User"), "User")

    def test_repeated_requests_get_numbered_suffixes(self):
        tracker = NameTracker()
        names = [tracker.unique_name("User") for _ in range(4)]
        self.assertEqual(names, ["User", "User_2", "User_3", "User_4"])

    def test_candidates_are_case_sensitive(self):
        tracker = NameTracker()
        self.assertEqual(tracker.unique_name("user"), "user")
        self.assertEqual(tracker.unique_name("User"), "User")

    def test_literal_request_for_issued_suffix_gets_its_own_suffix(self):
        tracker = NameTracker()
        self.assertEqual(tracker.unique_name("User"), "User")
        self.assertEqual(tracker.unique_name("User"), "User_2")
        self.assertEqual(tracker.unique_name("User_2"), "User_2_2")
        self.assertEqual(tracker.unique_name("User"), "User_3")

    def test_generated_suffix_skips_literal_names(self):
        tracker = NameTracker()
        self.assertEqual(tracker.unique_name("User_2"), "User_2")
        self.assertEqual(tracker.unique_name("User"), "User")
        self.assertEqual(tracker.unique_name("User"), "User_3")

    def test_independent_instances(self):
        first = NameTracker()
        second = NameTracker()
        first.unique_name("id")
        self.assertEqual(second.unique_name("id"), "id")
        self.assertTrue(first.is_issued("id"))
        self.assertEqual(len(first), 1)


@pytest.mark.parametrize("count", [1, 2, 5, 25])
def test_names_are_pairwise_distinct(count):
    tracker = NameTracker()
    names = [tracker.unique_name("Item") for _ in range(count)]
    assert names[0] == "Item"
    assert names[1:] == [f"Item_{i}" for i in range(2, count + 1)]
    assert len(set(names)) == count
