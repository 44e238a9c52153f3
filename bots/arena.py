"""Simple bot arena for Two Hundred."""

from __future__ import annotations

import argparse
import logging
from typing import Dict, Iterable, Optional, Sequence

from twohundred.config import GameConfig
from twohundred.service import GameRegistry
from twohundred.state import Game, Player, Team

from .base import BotStrategy
from .random_bot import RandomBot

logger = logging.getLogger(__name__)

# Upper bound on deals per game; reaching it means the bots are stuck.
MAX_DEALS = 500


def _seat_players(bots: Sequence[BotStrategy]) -> list[Player]:
    return [
        Player(id=f"p{position}", name=f"{bot.name} {position}", position=position, is_bot=True)
        for position, bot in enumerate(bots)
    ]


def play_game(
    bots: Sequence[BotStrategy],
    config: Optional[GameConfig] = None,
    *,
    seed: Optional[int] = None,
    registry: Optional[GameRegistry] = None,
    max_deals: int = MAX_DEALS,
) -> Game:
    """Drive one game to completion through the registry and return it."""
    if len(bots) != 4:
        raise ValueError("Exactly four bots are required.")
    registry = registry or GameRegistry()
    game = registry.create_game(_seat_players(bots), config, seed=seed)
    seats = {player.id: bots[player.position] for player in game.players}

    while not game.is_finished():
        if game.round_number > max_deals:
            raise RuntimeError(f"Game {game.id} did not finish within {max_deals} deals.")
        player_id = game.current_player
        if player_id is None:
            raise RuntimeError(f"Game {game.id} has no current player in phase {game.phase.value}.")
        intent = seats[player_id].choose_intent(game, player_id)
        result = registry.submit(game.id, intent)
        if not result.accepted:
            raise RuntimeError(f"Bot {seats[player_id].name} sent a rejected intent: {result.error}")
        game = result.game
    registry.remove(game.id)
    logger.info("Game %s finished after %s deals: %s", game.id, len(game.rounds), game.team_scores.as_dict())
    return game


def run_match(
    *,
    n_games: int = 10,
    seed: Optional[int] = None,
    config: Optional[GameConfig] = None,
) -> dict:
    """Play ``n_games`` games between four random bots and tally the wins."""
    wins: Dict[str, int] = {Team.TEAM1.value: 0, Team.TEAM2.value: 0}
    history = []
    for idx in range(n_games):
        game_seed = None if seed is None else seed + idx
        bots = [RandomBot(None if game_seed is None else game_seed * 4 + position) for position in range(4)]
        game = play_game(bots, config, seed=game_seed)
        if game.winner is not None:
            wins[game.winner.value] += 1
        history.append(
            {
                "winner": game.winner.value if game.winner is not None else None,
                "scores": game.team_scores.as_dict(),
                "deals": len(game.rounds),
            }
        )
    return {"wins": wins, "history": history}


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run a Two Hundred bot match.")
    parser.add_argument("--n", type=int, default=10, help="Number of games to play.")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--deck", type=int, default=36, choices=(36, 40))
    parser.add_argument("--target", type=int, default=200, choices=(200, 300, 500, 1000))
    parser.add_argument("--kitty", action="store_true", help="Deal a kitty (40-card deck only).")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    config = GameConfig(deck_variant=args.deck, score_target=args.target, has_kitty=args.kitty)
    results = run_match(n_games=args.n, seed=args.seed, config=config)

    print(f"Wins after {args.n} games: {results['wins']}")
    deals = sum(entry["deals"] for entry in results["history"])
    print(f"Average deals per game: {deals / max(len(results['history']), 1):.1f}")


if __name__ == "__main__":
    main()
