"""Interactive Pokedex command loop."""

from __future__ import annotations

import json
import random
import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, TextIO

from .cache import Cache
from .client import (
    APIResource,
    ClientError,
    MapResponse,
    PokemonDetail,
    get_explore_area,
    get_map,
    get_pokemon_info,
)

POKEDEX_URL = "https://pokeapi.co/api/v2/"
LOCATION_AREA_URL = POKEDEX_URL + "location-area/"
POKEMON_URL = POKEDEX_URL + "pokemon/"

PROMPT = "Pokedex > "
CACHE_INTERVAL = 5.0
CATCH_THRESHOLD = 40


class _ExitRequested(Exception):
    """Signals that the user asked to leave the loop."""


@dataclass
class Config:
    """Pagination state for the location-area listing."""

    prev: str = ""
    next: str = LOCATION_AREA_URL


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    callback: Callable[[str], None]


def clean_input(text: str) -> list[str]:
    """Lower-case the text and split it on whitespace."""
    return text.lower().split()


class Repl:
    """Holds the session state and runs the commands typed by the user."""

    def __init__(
        self,
        config: Config | None = None,
        cache: Cache | None = None,
        pokedex: dict[str, PokemonDetail] | None = None,
        out: TextIO | None = None,
        rng: Any = None,
    ) -> None:
        self.config = config if config is not None else Config()
        self.cache = cache if cache is not None else Cache(CACHE_INTERVAL)
        self.pokedex = pokedex if pokedex is not None else {}
        self.out = out if out is not None else sys.stdout
        self.rng = rng if rng is not None else random.Random()

    def _print(self, text: str = "") -> None:
        self.out.write(text + "\n")

    def commands(self) -> dict[str, Command]:
        """Return the available commands keyed by the word that invokes them."""
        return {
            "exit": Command("Exit", "Exit the Pokedex.", self.command_exit),
            "help": Command(
                "Help", "List all commands and their descriptions.", self.command_help
            ),
            "map": Command("Map", "Page forward in the Pokedex areas.", self.command_map),
            "mapb": Command(
                "Map Back", "Page backward in the Pokedex areas.", self.command_mapb
            ),
            "explore": Command(
                "Explore",
                "Explore a specific area in a map area.\nUsage: explore <area_name>",
                self.command_explore,
            ),
            "catch": Command(
                "Catch",
                "Catch a Pokemon.\nUsage: catch <pokemon_name>",
                self.command_catch,
            ),
            "inspect": Command(
                "Inspect",
                "Inspect a Pokemon.\nUsage: inspect <pokemon_name>",
                self.command_inspect,
            ),
            "pokedex": Command(
                "Pokedex", "List all Pokemon in your Pokedex.", self.command_pokedex
            ),
        }

    def dispatch(self, line: str) -> bool:
        """Run one input line. Return False once the user has asked to exit."""
        words = clean_input(line)
        if not words:
            return True
        name = words[0]
        arg = words[1] if len(words) > 1 else ""
        command = self.commands().get(name)
        if command is None:
            self._print(f"unknown command '{name}'. Type 'help' for a list of commands.")
            return True
        try:
            command.callback(arg)
        except _ExitRequested:
            return False
        except (ClientError, ValueError) as exc:
            self._print(f"error executing command '{name}': {exc}")
        return True

    def run(self, lines: Iterable[str]) -> None:
        """Prompt for and execute lines until exit or end of input."""
        source = iter(lines)
        while True:
            self.out.write(PROMPT)
            self.out.flush()
            try:
                line = next(source)
            except StopIteration:
                self._print()
                return
            if not self.dispatch(line):
                return

    def command_exit(self, arg: str) -> None:
        self._print("Exiting Pokedex... Bye bye!")
        raise _ExitRequested

    def command_help(self, arg: str) -> None:
        self._print("Available commands:")
        commands = self.commands()
        for name in sorted(commands):
            self._print("-----> " + commands[name].name)
            self._print(commands[name].description)

    def _load_page(self, url: str) -> list[APIResource]:
        cached = self.cache.get(url)
        if cached is not None:
            try:
                data = json.loads(cached)
                if not isinstance(data, dict):
                    raise ValueError("expected an object")
                page = MapResponse.from_dict(data)
            except (ValueError, TypeError, AttributeError) as exc:
                raise ValueError(f"error unmarshalling cached data: {exc}") from exc
        else:
            try:
                page = get_map(url)
            except ClientError as exc:
                raise ClientError(f"error fetching map data: {exc}") from exc
            self.cache.add(url, json.dumps(page.to_dict()).encode())
        self.config.prev = page.previous
        self.config.next = page.next
        return page.results

    def command_map(self, arg: str) -> None:
        if not self.config.next:
            self._print("You are on the last page")
            return
        for result in self._load_page(self.config.next):
            self._print(f"Name: {result.name}")

    def command_mapb(self, arg: str) -> None:
        if not self.config.prev:
            self._print("you are on the first page")
            return
        for result in self._load_page(self.config.prev):
            self._print(f"Name: {result.name}")

    def command_explore(self, arg: str) -> None:
        if not arg:
            raise ValueError("an area name must be provided")
        url = LOCATION_AREA_URL + arg
        self._print(f"Exploring area:  {arg}")

        cached = self.cache.get(url)
        if cached is not None:
            try:
                names = json.loads(cached)
                if not isinstance(names, list):
                    raise ValueError("expected a list")
            except ValueError as exc:
                raise ValueError(f"error unmarshalling cached data: {exc}") from exc
        else:
            try:
                names = get_explore_area(url)
            except ClientError as exc:
                raise ClientError(f"error fetching explore area data: {exc}") from exc
            self.cache.add(url, json.dumps(names).encode())

        if not names:
            self._print("no Pokemon found in this area")
            return
        self._print("Found pokemon:")
        for name in names:
            self._print(f"- {name}")

    def command_catch(self, arg: str) -> None:
        if not arg:
            raise ValueError("a Pokemon name must be provided")
        pokemon_name = arg.lower()
        url = POKEMON_URL + pokemon_name

        cached = self.cache.get(url)
        if cached is not None:
            try:
                data = json.loads(cached)
                if not isinstance(data, dict):
                    raise ValueError("expected an object")
                pokemon = PokemonDetail.from_dict(data)
            except (ValueError, TypeError, AttributeError) as exc:
                raise ValueError(f"error unmarshalling cached data: {exc}") from exc
        else:
            try:
                pokemon = get_pokemon_info(url)
            except ClientError as exc:
                raise ClientError(f"error fetching Pokemon data: {exc}") from exc
            self.cache.add(url, json.dumps(pokemon.to_dict()).encode())

        self._print(f"Throwing a Pokeball at {pokemon_name}...")
        attempt = self.rng.randint(0, pokemon.base_experience)
        if attempt < CATCH_THRESHOLD:
            self._print(f"{pokemon.name} was caught!")
            self.pokedex[pokemon.name] = pokemon
        else:
            self._print(f"{pokemon.name} escaped!")

    def command_inspect(self, arg: str) -> None:
        if not arg:
            raise ValueError("a Pokemon name must be provided")
        pokemon_name = arg.lower()
        pokemon = self.pokedex.get(pokemon_name)
        if pokemon is None:
            self._print(f"Pokemon {pokemon_name} not found in your Pokedex")
            return
        self._print(f"Name: {pokemon.name}")
        self._print(f"Height: {pokemon.height}")
        self._print(f"Weight: {pokemon.weight}")
        self._print("Stats:")
        for stat in pokemon.stats:
            self._print(f" - {stat.stat.name}: {stat.base_stat}")
        self._print("Types:")
        for poke_type in pokemon.types:
            self._print(f" - {poke_type.poke_type.name}")

    def command_pokedex(self, arg: str) -> None:
        if not self.pokedex:
            self._print("your Pokedex is empty")
            return
        self._print("Your Pokedex:")
        for name in self.pokedex:
            self._print(f" - {name}")


def main(argv: list[str] | None = None) -> int:
    """Run the Pokedex on standard input and output."""
    with Cache(CACHE_INTERVAL) as cache:
        Repl(cache=cache).run(sys.stdin)
    return 0


if __name__ == "__main__":
    sys.exit(main())