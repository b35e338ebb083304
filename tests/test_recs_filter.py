import logging

from norepeat.rules import filter_candidates
from norepeat.rules.types import CandidateOutfit, NoRepeatMode, Preference

from fixtures import TODAY, USER_ID, days_ago, pref, wear


def outfit(items, outfit_id=None, **payload):
    return CandidateOutfit(item_ids=tuple(items), outfit_id=outfit_id, payload=payload or None)


class TestItemMode:
    def test_single_recent_item_taints_outfit(self):
        history = [wear(3, ["I1", "I2"], "O1")]
        cands = [outfit(["I1", "I9"], "A"), outfit(["I3", "I4"], "B")]
        res = filter_candidates(cands, pref(7, "item"), history, TODAY, strict_min_count=0)
        assert [c.outfit_id for c in res.eligible] == ["B"]
        assert len(res.excluded) == 1
        ex = res.excluded[0]
        assert ex.candidate.outfit_id == "A"
        assert ex.blocked_ids == ("I1",)
        assert ex.last_worn_on == days_ago(3)
        assert ex.reason == f"item I1 worn on {days_ago(3).isoformat()}, cooldown 7 days"

    def test_reason_lists_every_blocking_item(self):
        history = [wear(1, ["I1"]), wear(4, ["I2"])]
        res = filter_candidates([outfit(["I1", "I2", "I3"])], pref(5, "item"), history, TODAY, strict_min_count=0)
        ex = res.excluded[0]
        assert ex.blocked_ids == ("I1", "I2")
        assert ex.last_worn_on == days_ago(1)
        assert "item I1 worn on" in ex.reason
        assert "item I2 worn on" in ex.reason
        assert ex.reason.endswith("cooldown 5 days")

    def test_one_day_cooldown_reason_is_singular(self):
        res = filter_candidates([outfit(["I1"])], pref(1, "item"), [wear(0, ["I1"])], TODAY, strict_min_count=0)
        assert res.excluded[0].reason.endswith("cooldown 1 day")

    def test_unsaved_outfit_still_checked_by_items(self):
        res = filter_candidates([outfit(["I1"])], pref(7, "item"), [wear(2, ["I1"])], TODAY, strict_min_count=0)
        assert res.eligible == []
        assert len(res.excluded) == 1


class TestOutfitMode:
    def test_excludes_only_the_worn_outfit(self):
        history = [wear(1, ["I1", "I2"], "O1")]
        cands = [outfit(["I1", "I2"], "O1"), outfit(["I1", "I5"], "O2")]
        res = filter_candidates(cands, pref(7, "outfit"), history, TODAY, strict_min_count=0)
        assert [c.outfit_id for c in res.eligible] == ["O2"]
        assert res.excluded[0].blocked_ids == ("O1",)
        assert res.excluded[0].reason == f"outfit O1 worn on {days_ago(1).isoformat()}, cooldown 7 days"

    def test_outfit_without_identity_is_always_eligible(self):
        history = [wear(1, ["I1", "I2"], "O1")]
        res = filter_candidates([outfit(["I1", "I2"])], pref(7, "outfit"), history, TODAY)
        assert len(res.eligible) == 1
        assert res.excluded == []
        assert res.fallbacks == []

    def test_same_items_under_new_identity_are_eligible(self):
        history = [wear(1, ["I1", "I2"], "O1")]
        res = filter_candidates([outfit(["I1", "I2"], "O9")], pref(7, "outfit"), history, TODAY)
        assert [c.outfit_id for c in res.eligible] == ["O9"]


class TestFallbacks:
    def test_fallbacks_ranked_by_repeat_count_then_id(self):
        history = [wear(1, ["I1", "I2", "I3"])]
        cands = [
            outfit(["I1", "I2", "I3"], "C"),
            outfit(["I1", "I9"], "B"),
            outfit(["I2", "I8"], "A"),
            outfit(["I7", "I6"], "D"),
        ]
        res = filter_candidates(cands, pref(7, "item"), history, TODAY, strict_min_count=3)
        assert [c.outfit_id for c in res.eligible] == ["D"]
        assert [f.candidate.outfit_id for f in res.fallbacks] == ["A", "B", "C"]
        assert res.fallbacks[0].repeated_item_ids == ("I2",)
        assert res.fallbacks[2].repeated_item_ids == ("I1", "I2", "I3")

    def test_no_fallbacks_when_enough_strict_results(self):
        history = [wear(1, ["I1"])]
        cands = [outfit(["I1"], "X")] + [outfit([f"N{i}"], f"O{i}") for i in range(3)]
        res = filter_candidates(cands, pref(7, "item"), history, TODAY, strict_min_count=3)
        assert len(res.eligible) == 3
        assert res.fallbacks == []

    def test_outfit_mode_fallbacks_report_recent_items(self):
        history = [wear(1, ["I1", "I2"], "O1")]
        res = filter_candidates([outfit(["I1", "I2", "I3"], "O1")], pref(7, "outfit"), history, TODAY)
        assert res.fallbacks[0].repeated_item_ids == ("I1", "I2")

    def test_default_min_count_applies(self):
        history = [wear(1, ["I1"])]
        cands = [outfit(["I1"], "X"), outfit(["I2"], "Y")]
        res = filter_candidates(cands, pref(7, "item"), history, TODAY)
        assert [f.candidate.outfit_id for f in res.fallbacks] == ["X"]


class TestPurity:
    def test_disabled_policy_passes_everything(self):
        history = [wear(0, ["I1"], "O1")]
        cands = [outfit(["I1"], "O1"), outfit(["I2"])]
        res = filter_candidates(cands, pref(0, "item"), history, TODAY)
        assert res.eligible == cands
        assert res.excluded == [] and res.fallbacks == []
        assert res.cutoff == TODAY

    def test_inputs_untouched_and_payload_passed_through(self):
        history = [wear(1, ["I1"])]
        snapshot = list(history)
        cands = [outfit(["I2"], "A", score=0.9, reason="warm day")]
        p = pref(7, "item")
        res = filter_candidates(cands, p, history, TODAY)
        assert history == snapshot
        assert p.no_repeat_days == 7
        assert res.eligible[0].payload == {"score": 0.9, "reason": "warm day"}

    def test_result_independent_of_history_order(self):
        history = [wear(1, ["I1"]), wear(3, ["I2"], "O2"), wear(9, ["I3"])]
        cands = [outfit(["I1"], "A"), outfit(["I2"], "B"), outfit(["I3"], "C")]
        a = filter_candidates(cands, pref(7, "item"), history, TODAY, strict_min_count=0)
        b = filter_candidates(cands, pref(7, "item"), list(reversed(history)), TODAY, strict_min_count=0)
        assert a.eligible == b.eligible
        assert [e.reason for e in a.excluded] == [e.reason for e in b.excluded]


class TestImpossiblePolicy:
    def test_out_of_range_days_do_not_break_filtering(self, caplog):
        cands = [outfit(["I1"], "A"), outfit(["I2"], "B")]
        history = [wear(100, ["I1"])]
        with caplog.at_level(logging.WARNING, logger="norepeat.policy"):
            res = filter_candidates(cands, Preference(USER_ID, 181), history, TODAY, strict_min_count=0)
        assert res.preference.no_repeat_days == 180
        assert res.cutoff == days_ago(180)
        assert [c.outfit_id for c in res.eligible] == ["B"]
        assert res.excluded[0].reason.endswith("cooldown 180 days")
        assert "clamped" in caplog.text

    def test_unknown_mode_filters_as_item_mode(self):
        res = filter_candidates([outfit(["I1"], "A")], Preference(USER_ID, 7, "weekly"), [wear(1, ["I1"])], TODAY)
        assert res.preference.no_repeat_mode is NoRepeatMode.ITEM
        assert res.eligible == []
        assert len(res.excluded) == 1
