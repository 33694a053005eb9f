# pokedexrepl

An interactive Pokedex in your terminal. Page through the location areas of
the Pokemon world, explore an area to see which Pokemon live there, try to
catch them, and inspect the ones you have caught. Data comes from the public
PokeAPI. Responses are kept in an in-memory cache whose entries are dropped
after about five seconds.

It needs nothing beyond the Python standard library (Python 3.10 or later).

## Installation

```
pip install .
```

## Usage

Start the shell:

```
pokedexrepl
```

You get a `Pokedex > ` prompt. Input is lower-cased and split on whitespace;
the first word is the command and the second, if any, is its argument. Extra
words are ignored. Unknown commands print a hint to type `help`. The shell
ends on `exit` or at end of input.

| Command               | What it does                                                   |
|-----------------------|----------------------------------------------------------------|
| `help`                | List all commands and their descriptions, sorted by name.      |
| `map`                 | Show the next page of location area names.                     |
| `mapb`                | Show the previous page of location area names.                 |
| `explore <area_name>` | List the distinct Pokemon encountered in a location area.      |
| `catch <pokemon>`     | Throw a Pokeball; the higher the base experience, the likelier an escape. |
| `inspect <pokemon>`   | Show name, height, weight, stats and types of a caught Pokemon. |
| `pokedex`             | List every Pokemon you have caught.                            |
| `exit`                | Leave the Pokedex.                                             |

A catch succeeds when a random whole number between 0 and the Pokemon's base
experience (inclusive) is below 40.

Example session:

```
Pokedex > map
Name: canalave-city-area
...
Pokedex > explore canalave-city-area
Exploring area:  canalave-city-area
Found pokemon:
- tentacool
...
Pokedex > catch tentacool
Throwing a Pokeball at tentacool...
tentacool was caught!
Pokedex > inspect tentacool
Name: tentacool
Height: ...
Weight: ...
Stats:
 - hp: ...
Types:
 - ...
```

Errors, such as a failed request or a missing argument, are reported as
`error executing command '<name>': <reason>` and the shell carries on.

## Using it as a library

The pieces behind the shell can be used on their own:

- `pokedexrepl.cache.Cache(interval)` is a thread-safe byte cache. A
  background thread removes entries older than `interval` seconds every
  `interval` seconds; `reap()` does the same on demand. It offers `add`,
  `get` (returns `None` for a missing key), `in`, `len`, `close()`, and works
  as a context manager that stops the background thread on exit.
- `pokedexrepl.client` provides `get_map(url)` (returns a `MapResponse`),
  `get_explore_area(url)` (returns a list of unique Pokemon names in
  encounter order) and `get_pokemon_info(url)` (returns a `PokemonDetail`).
  They raise `ClientError` for an empty URL, a non-200 status, a network
  failure or undecodable JSON. The data classes `APIResource`, `MapResponse`,
  `PokemonDetail`, `PokeStat` and `PokemonType` each have `from_dict` and
  `to_dict`.
- `pokedexrepl.cli.Repl` runs the command loop over any iterable of lines
  (`run`) or a single line (`dispatch`), writing to any text stream. It
  accepts its own `Config`, `Cache`, Pokedex dictionary and random number
  generator, which makes it easy to script and test. `clean_input` is the
  tokenizer it uses.

## Limitations

- Caught Pokemon live only in memory; the Pokedex is not saved and is empty
  again each time the shell starts.
- The API location is fixed; there are no command-line options.

## Running the tests

```
pip install ".[test]"
pytest
```