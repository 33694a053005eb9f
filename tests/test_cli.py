import io
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from pokedexrepl.cache import Cache
from pokedexrepl.cli import (
    LOCATION_AREA_URL,
    POKEMON_URL,
    Config,
    Repl,
    clean_input,
)
from pokedexrepl.client import APIResource, PokemonDetail, PokemonType, PokeStat


class FixedRng:
    def __init__(self, value):
        self.value = value
        self.calls = []

    def randint(self, a, b):
        self.calls.append((a, b))
        return self.value


@pytest.fixture
def cache():
    with Cache(3600) as c:
        yield c


def make_repl(cache, config=None, pokedex=None, rng=None):
    out = io.StringIO()
    repl = Repl(
        config if config is not None else Config(),
        cache,
        pokedex if pokedex is not None else {},
        out,
        rng if rng is not None else FixedRng(0),
    )
    return repl, out


PIKACHU = {
    "base_experience": 112,
    "name": "pikachu",
    "height": 4,
    "weight": 60,
    "stats": [{"base_stat": 35, "stat": {"name": "hp", "url": "u"}}],
    "types": [{"slot": 1, "type": {"name": "electric", "url": "u"}}],
}


@pytest.mark.parametrize(
    "text, expected",
    [
        ("  ", []),
        ("  hello  ", ["hello"]),
        ("  hello  world  ", ["hello", "world"]),
        ("  HellO  World  ", ["hello", "world"]),
    ],
)
def test_clean_input(text, expected):
    assert clean_input(text) == expected


def test_command_pokedex(cache):
    pokedex = {}
    repl, out = make_repl(cache, pokedex=pokedex)
    repl.command_pokedex("pikachu")
    assert len(pokedex) == 0
    assert out.getvalue() == "your Pokedex is empty\n"

    pokedex["pikachu"] = PokemonDetail(base_experience=100, name="pikachu", height=4, weight=60)
    out.truncate(0)
    out.seek(0)
    repl.command_pokedex("pikachu")
    assert len(pokedex) == 1
    assert "pikachu" in pokedex
    assert out.getvalue() == "Your Pokedex:\n - pikachu\n"


def test_help_lists_commands_sorted(cache):
    repl, out = make_repl(cache)
    repl.command_help("")
    lines = out.getvalue().splitlines()
    assert lines[0] == "Available commands:"
    headers = [line for line in lines if line.startswith("-----> ")]
    assert headers == [
        "-----> Catch",
        "-----> Exit",
        "-----> Explore",
        "-----> Help",
        "-----> Inspect",
        "-----> Map",
        "-----> Map Back",
        "-----> Pokedex",
    ]


def test_commands_keys(cache):
    repl, _ = make_repl(cache)
    assert sorted(repl.commands()) == [
        "catch", "exit", "explore", "help", "inspect", "map", "mapb", "pokedex",
    ]


def test_default_config_starts_at_location_areas():
    config = Config()
    assert config.prev == ""
    assert config.next == LOCATION_AREA_URL


def test_map_uses_cache_and_updates_config(cache):
    page = {
        "count": 2,
        "next": "page2",
        "previous": "",
        "results": [{"name": "canalave-city-area", "url": "a"}, {"name": "eterna-city-area", "url": "b"}],
    }
    cache.add(LOCATION_AREA_URL, json.dumps(page).encode())
    config = Config()
    repl, out = make_repl(cache, config=config)
    repl.command_map("")
    assert out.getvalue() == "Name: canalave-city-area\nName: eterna-city-area\n"
    assert config.next == "page2"
    assert config.prev == ""


def test_map_on_last_page(cache):
    repl, out = make_repl(cache, config=Config(prev="p", next=""))
    repl.command_map("")
    assert out.getvalue() == "You are on the last page\n"


def test_mapb_on_first_page(cache):
    repl, out = make_repl(cache, config=Config(prev="", next="n"))
    repl.command_mapb("")
    assert out.getvalue() == "you are on the first page\n"


def test_mapb_uses_cache(cache):
    page = {"next": "n2", "previous": "p0", "results": [{"name": "back-area", "url": "x"}]}
    cache.add("p1", json.dumps(page).encode())
    config = Config(prev="p1", next="n1")
    repl, out = make_repl(cache, config=config)
    repl.command_mapb("")
    assert out.getvalue() == "Name: back-area\n"
    assert (config.prev, config.next) == ("p0", "n2")


def test_map_corrupt_cache_reports_error(cache):
    cache.add(LOCATION_AREA_URL, b"not json")
    repl, out = make_repl(cache)
    assert repl.dispatch("map") is True
    assert out.getvalue().startswith(
        "error executing command 'map': error unmarshalling cached data:"
    )


@pytest.fixture
def page_server():
    body = json.dumps(
        {"count": 1, "next": None, "previous": "prev_url", "results": [{"name": "location1", "url": "url1"}]}
    ).encode()

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            self.send_response(200)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, *args):
            pass

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}/"
    server.shutdown()
    server.server_close()


def test_map_fetches_and_caches(cache, page_server):
    config = Config(next=page_server)
    repl, out = make_repl(cache, config=config)
    repl.command_map("")
    assert out.getvalue() == "Name: location1\n"
    assert config.prev == "prev_url"
    assert config.next == ""
    cached = json.loads(cache.get(page_server))
    assert cached["results"] == [{"name": "location1", "url": "url1"}]
    assert cached["previous"] == "prev_url"


def test_explore_requires_argument(cache):
    repl, out = make_repl(cache)
    repl.dispatch("explore")
    assert out.getvalue() == "error executing command 'explore': an area name must be provided\n"


def test_explore_from_cache(cache):
    cache.add(LOCATION_AREA_URL + "pastoria-city-area", json.dumps(["tentacool", "magikarp"]).encode())
    repl, out = make_repl(cache)
    repl.dispatch("explore Pastoria-City-Area")
    assert out.getvalue() == (
        "Exploring area:  pastoria-city-area\nFound pokemon:\n- tentacool\n- magikarp\n"
    )


def test_explore_empty_area(cache):
    cache.add(LOCATION_AREA_URL + "void", b"[]")
    repl, out = make_repl(cache)
    repl.command_explore("void")
    assert out.getvalue() == "Exploring area:  void\nno Pokemon found in this area\n"


def test_catch_requires_argument(cache):
    repl, _ = make_repl(cache)
    with pytest.raises(ValueError, match="a Pokemon name must be provided"):
        repl.command_catch("")


def test_catch_success(cache):
    cache.add(POKEMON_URL + "pikachu", json.dumps(PIKACHU).encode())
    pokedex = {}
    rng = FixedRng(39)
    repl, out = make_repl(cache, pokedex=pokedex, rng=rng)
    repl.command_catch("pikachu")
    assert out.getvalue() == "Throwing a Pokeball at pikachu...\npikachu was caught!\n"
    assert rng.calls == [(0, 112)]
    assert pokedex["pikachu"].height == 4
    assert pokedex["pikachu"].stats[0].base_stat == 35


def test_catch_escape(cache):
    cache.add(POKEMON_URL + "pikachu", json.dumps(PIKACHU).encode())
    pokedex = {}
    repl, out = make_repl(cache, pokedex=pokedex, rng=FixedRng(40))
    repl.command_catch("pikachu")
    assert out.getvalue() == "Throwing a Pokeball at pikachu...\npikachu escaped!\n"
    assert pokedex == {}


def test_inspect_caught_pokemon(cache):
    pokemon = PokemonDetail(
        base_experience=112,
        name="pikachu",
        height=4,
        weight=60,
        stats=[PokeStat(35, APIResource("hp", "")), PokeStat(55, APIResource("attack", ""))],
        types=[PokemonType(1, APIResource("electric", ""))],
    )
    repl, out = make_repl(cache, pokedex={"pikachu": pokemon})
    repl.command_inspect("PIKACHU")
    assert out.getvalue() == (
        "Name: pikachu\nHeight: 4\nWeight: 60\nStats:\n - hp: 35\n - attack: 55\n"
        "Types:\n - electric\n"
    )


def test_inspect_missing(cache):
    repl, out = make_repl(cache)
    repl.command_inspect("mew")
    assert out.getvalue() == "Pokemon mew not found in your Pokedex\n"


def test_unknown_command(cache):
    repl, out = make_repl(cache)
    assert repl.dispatch("fly away") is True
    assert out.getvalue() == "unknown command 'fly'. Type 'help' for a list of commands.\n"


def test_blank_line_is_ignored(cache):
    repl, out = make_repl(cache)
    assert repl.dispatch("   ") is True
    assert out.getvalue() == ""


def test_exit_stops_dispatch(cache):
    repl, out = make_repl(cache)
    assert repl.dispatch("exit") is False
    assert out.getvalue() == "Exiting Pokedex... Bye bye!\n"


def test_run_stops_at_exit(cache):
    repl, out = make_repl(cache)
    repl.run(["pokedex\n", "exit\n", "help\n"])
    text = out.getvalue()
    assert text == "Pokedex > your Pokedex is empty\nPokedex > Exiting Pokedex... Bye bye!\n"
    assert "Available commands" not in text


def test_run_ends_at_end_of_input(cache):
    repl, out = make_repl(cache)
    repl.run(["\n"])
    assert out.getvalue() == "Pokedex > Pokedex > \n"