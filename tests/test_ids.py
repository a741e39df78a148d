import pytest

from app.shared.ids import build_content_id, parse_content_id, slugify_key


def test_build_round_trips_through_parse():
    ref = parse_content_id(build_content_id("CinemaOS", "the-matrix-1999"))

    assert ref.adapter == "cinemaos"
    assert ref.key == "the-matrix-1999"
    assert ref.base_id == "scraped:cinemaos:the-matrix-1999"
    assert not ref.is_external


def test_keys_may_contain_colons():
    ref = parse_content_id("scraped:alpha:movie:123")

    assert ref.adapter == "alpha"
    assert ref.key == "movie:123"


def test_episode_suffix_is_split_off():
    ref = parse_content_id("scraped:alpha:the-office:3:12")

    assert (ref.key, ref.season, ref.episode) == ("the-office", 3, 12)
    assert ref.base_id == "scraped:alpha:the-office"


def test_imdb_ids_are_external():
    movie = parse_content_id("tt0133093")
    episode = parse_content_id("tt0386676:2:1")

    assert movie.is_external and movie.key == "tt0133093"
    assert (episode.key, episode.season, episode.episode) == ("tt0386676", 2, 1)


def test_url_encoded_ids_are_decoded():
    assert parse_content_id("scraped%3Aalpha%3Adune").key == "dune"


@pytest.mark.parametrize("identifier", ["", "dune", "kitsu:123", "scraped:alpha", "scraped::key", "ttabc"])
def test_unroutable_ids(identifier):
    assert parse_content_id(identifier) is None


def test_slugify_key():
    assert slugify_key("The Matrix: Reloaded") == "the-matrix-reloaded"
