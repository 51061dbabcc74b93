from community_pulse.themes import extract_pain_points, extract_themes, pain_point_for_post


def test_themes_rank_by_frequency(make_post, lexicon):
    posts = [
        make_post(title="Budget tracking apps"),
        make_post(title="Budget planning for freelancers"),
        make_post(title="Tracking invoices with budget tools"),
    ]
    themes = extract_themes(posts, lexicon)
    assert themes[0] == "budget"
    assert themes[1] == "tracking"


def test_theme_ties_keep_first_seen_order(make_post, lexicon):
    posts = [make_post(title="zebra yak"), make_post(title="apple mango yak")]
    # "yak" is too short; remaining words all appear once
    assert extract_themes(posts, lexicon) == ["zebra", "apple", "mango"]


def test_themes_drop_stop_words_and_short_tokens(make_post, lexicon):
    posts = [make_post(title="Which tool would work with this for you and them")]
    themes = extract_themes(posts, lexicon)
    assert "which" not in themes
    assert "would" not in themes
    assert "with" not in themes
    assert "this" not in themes
    assert all(len(theme) > 3 for theme in themes)
    assert themes == ["tool", "work", "them"]


def test_themes_ignore_bodies(make_post, lexicon):
    posts = [make_post(title="Invoices", body="payments payments payments")]
    assert extract_themes(posts, lexicon) == ["invoices"]


def test_themes_capped_at_six(make_post, lexicon):
    posts = [make_post(title="alpha bravo charlie delta foxtrot hotel india juliet")]
    themes = extract_themes(posts, lexicon)
    assert len(themes) == 6
    assert themes == ["alpha", "bravo", "charlie", "delta", "foxtrot", "hotel"]


def test_themes_empty_batch(lexicon):
    assert extract_themes([], lexicon) == []


def test_pain_point_first_keyword_wins(make_post, tiny_lexicon):
    # "broken" outranks "need" even though "need" appears first in the text
    post = make_post(title="I need a new router.", body="The old one is broken again")
    assert pain_point_for_post(post, tiny_lexicon.pain_keywords) == "the old one is broken again"


def test_pain_point_stops_after_first_matching_keyword(make_post, tiny_lexicon):
    # "broken" only appears in a sentence that is too short, so nothing is
    # recorded even though "need" has a usable sentence.
    post = make_post(title="Broken.", body="We really need something that works for teams")
    assert pain_point_for_post(post, tiny_lexicon.pain_keywords) is None


def test_pain_point_sentence_length_bounds(make_post, tiny_lexicon):
    too_long = "this sentence keeps going " * 5 + "and it is broken"
    post = make_post(title=too_long, body="")
    assert pain_point_for_post(post, tiny_lexicon.pain_keywords) is None


def test_pain_point_truncated_to_80_chars(make_post, tiny_lexicon):
    sentence = "broken " + "x" * 85
    post = make_post(title=sentence)
    excerpt = pain_point_for_post(post, tiny_lexicon.pain_keywords)
    assert excerpt is not None
    assert len(excerpt) == 80
    assert excerpt.startswith("broken")


def test_pain_point_dropped_when_truncation_cuts_every_keyword(make_post, tiny_lexicon):
    late = "x" * 82 + " broken thing"
    post = make_post(title=f"{late}. my sync is broken again")
    assert pain_point_for_post(post, tiny_lexicon.pain_keywords) is None


def test_pain_point_kept_when_another_keyword_survives_truncation(make_post, tiny_lexicon):
    sentence = "need " + "x" * 76 + " broken"
    excerpt = pain_point_for_post(make_post(title=sentence), tiny_lexicon.pain_keywords)

    assert excerpt == sentence[:80]
    assert "broken" not in excerpt


def test_pain_points_deduplicated_and_capped(make_post, lexicon):
    posts = [make_post(title="Checkout is frustrating for mobile users") for _ in range(3)]
    posts += [make_post(title=f"Onboarding problem number {i} for small shops") for i in range(8)]
    pains = extract_pain_points(posts, lexicon)

    assert pains[0] == "checkout is frustrating for mobile users"
    assert len(pains) == 6
    assert len(set(pains)) == len(pains)


def test_pain_points_contain_keyword_and_fit(make_post, lexicon):
    posts = [
        make_post(title="Why is invoicing so hard?", body="I wish there was a simple tool. Thanks!"),
        make_post(title="Launch day", body="We are unable to get traction with ads."),
        make_post(title="Shipped v2", body="Everything went smoothly."),
    ]
    pains = extract_pain_points(posts, lexicon)
    assert pains == ["why is invoicing so hard", "launch day we are unable to get traction with ads"]
    for pain in pains:
        assert len(pain) <= 80
        assert any(keyword in pain for keyword in lexicon.pain_keywords)
