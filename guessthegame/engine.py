# guessthegame/engine.py
from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Sequence, Union

from guessthegame.bonus import generate_bonus_round, roll_bonus
from guessthegame.catalog import find_by_name
from guessthegame.config import MAX_GUESSES, SHOP_EVERY
from guessthegame.lifelines import (
    consultant_options,
    final_cost,
    generate_anagram,
    get_shop_item,
    get_shop_items,
    new_shop_visit,
    pick_double_trouble,
    purchase_allowed,
    shop_due,
    shop_offers,
)
from guessthegame.models import (
    Game,
    GuessOutcome,
    GuessRecord,
    HistoryEntry,
    LifelineReveal,
    LifelineType,
    RoundState,
    RoundStatus,
    RunState,
    ShopItem,
    ShopOffer,
    ShopVisit,
)
from guessthegame.redaction import redact
from guessthegame.scheduler import random_crops, weighted_game_order
from guessthegame.scoring import bonus_round_points, next_hot_streak_count, round_points
from guessthegame.similarity import is_same_series
from guessthegame.storage import RunStore, to_plain

logger = logging.getLogger(__name__)


class EndlessEngine:
    """
    Endless-mode progression: owns the RunState and applies every player
    action to it. Actions that don't apply in the current state are silent
    no-ops; each one that does is saved through the store before returning.
    """

    def __init__(
        self,
        catalog: Sequence[Game],
        store: Optional[RunStore] = None,
        rng: Optional[random.Random] = None,
        bait_names: Sequence[str] = (),
    ):
        self.catalog: List[Game] = list(catalog)
        self._by_id: Dict[int, Game] = {g.id: g for g in self.catalog}
        self.store = store if store is not None else RunStore()
        self.rng = rng if rng is not None else random.Random()
        self.bait_names = list(bait_names)

        self.stats = self.store.load_stats()
        state = self.store.load()
        if state is None:
            state = RunState(high_score=self.store.load_high_score())
        self.state = state

        if self.catalog:
            self._repair_order()
        if not self.state.round.crop_positions:
            self.state.round.crop_positions = random_crops(self.rng)
        self._save()

    # --- Accessors ---

    @property
    def round(self) -> RoundState:
        return self.state.round

    @property
    def current_game(self) -> Optional[Game]:
        return self._game_at(self.state.current_index)

    def game(self, game_id: int) -> Optional[Game]:
        return self._by_id.get(game_id)

    def get_shop_items(self) -> List[ShopItem]:
        return get_shop_items()

    def run_summary(self) -> Dict[str, Any]:
        """Payload for sharing a run."""
        return {
            "history": to_plain(self.state.history),
            "total_score": self.state.score,
            "total_games": len(self.state.history),
            "completed": self.state.is_game_over,
        }

    # --- Round actions ---

    def submit_guess(self, guess: Union[Game, str], is_fatal: bool = False) -> bool:
        """
        Guess a catalog game or a free-text name. `is_fatal` ends the run on
        any non-correct guess (a wrong consultant pick).
        """
        target = self._playable_target()
        if target is None:
            return False

        if isinstance(guess, Game):
            guessed: Optional[Game] = guess
            name = guess.name
        else:
            name = guess.strip()
            guessed = find_by_name(self.catalog, name)
            if guessed is not None:
                name = guessed.name
        if not name:
            return False

        outcome = self._classify(target, guessed, name)
        record = GuessRecord(name=name, outcome=outcome)
        logger.debug("guess %r -> %s", name, outcome.value)

        if outcome is GuessOutcome.CORRECT:
            self._win(target, record)
        else:
            self._miss(target, record, is_fatal)
        self._save()
        return True

    def skip_guess(self) -> bool:
        target = self._playable_target()
        if target is None:
            return False
        self._miss(target, GuessRecord(name="Skipped", outcome=GuessOutcome.SKIPPED), False)
        self._save()
        return True

    def use_lifeline(self, lifeline: Union[LifelineType, str]) -> Optional[LifelineReveal]:
        try:
            kind = LifelineType(lifeline)
        except ValueError:
            return None
        target = self._playable_target()
        if target is None or self.state.lifelines.get(kind.value, 0) <= 0:
            return None

        reveal = LifelineReveal(type=kind.value)
        if kind is LifelineType.COVER_PEEK:
            if not target.cover:
                return None
            reveal.cover = target.cover
        elif kind is LifelineType.SYNOPSIS:
            if not target.synopsis:
                return None
            reveal.synopsis = redact(target.synopsis, target.name)
        elif kind is LifelineType.ANAGRAM:
            reveal.anagram = generate_anagram(self.rng, target.name)
        elif kind is LifelineType.CONSULTANT:
            reveal.options = consultant_options(self.rng, target, self.catalog, self.bait_names)
        elif kind is LifelineType.DOUBLE_TROUBLE:
            other = pick_double_trouble(self.rng, target, self.catalog)
            if other is None:
                return None
            self.round.double_trouble_game_id = other.id
            reveal.game = other
        elif kind is LifelineType.ZOOM_OUT:
            self.round.zoom_out_active = True

        self.state.lifelines[kind.value] -= 1
        self.round.lifelines_used.append(kind.value)
        logger.debug("lifeline %s used on game %d", kind.value, target.id)

        if kind is LifelineType.SKIP:
            # a free pass: the round counts as done, but earns nothing
            self.round.status = RoundStatus.WON
            self.state.hot_streak_count = 0
            self._record(target, 0, "skipped")
            logger.info("round skipped: game=%d", target.id)

        self._save()
        return reveal

    # --- Shop ---

    def shop_available(self) -> bool:
        s = self.state
        return (
            shop_due(s)
            and s.shop is None
            and s.bonus_round is None
            and not s.is_game_over
            and s.round.status is RoundStatus.PLAYING
            # never interrupt a round already in progress
            and not s.round.guesses
        )

    def open_shop(self) -> Optional[ShopVisit]:
        if self.state.shop is not None:
            return self.state.shop
        if not self.shop_available():
            return None
        self.state.shop = new_shop_visit(self.rng, self.state.streak)
        logger.info("shop opened at streak %d (discounted: %s)",
                    self.state.streak, ", ".join(self.state.shop.discounted_item_ids))
        self._save()
        return self.state.shop

    def shop_offer(self) -> List[ShopOffer]:
        if self.state.shop is None:
            return []
        return shop_offers(self.state, self.state.shop)

    def buy_shop_item(self, item_id: str) -> bool:
        visit = self.state.shop
        item = get_shop_item(item_id)
        if visit is None or item is None or not purchase_allowed(self.state, visit, item):
            return False

        cost = final_cost(item, visit)
        self.state.score -= cost
        if item.is_all_in:
            self.state.score += item.bonus_points
            self.state.all_in_purchased = True
            self.state.high_score = max(self.state.high_score, self.state.score)
        else:
            self.state.lifelines[item.lifeline] = self.state.lifelines.get(item.lifeline, 0) + 1
        visit.purchased_item_ids.append(item.id)

        logger.info("bought %s for %d (score now %d)", item.id, cost, self.state.score)
        self._save()
        return True

    def close_shop(self) -> bool:
        if self.state.shop is None:
            return False
        self.state.last_shop_streak = self.state.streak
        self.state.shop = None
        logger.info("shop closed at streak %d", self.state.streak)
        self._save()
        return True

    # --- Progression ---

    def next_level(self) -> bool:
        s = self.state
        if s.is_game_over:
            self._reset_run()
            self._save()
            return True
        if s.bonus_round is not None or s.round.status is RoundStatus.PLAYING:
            return False

        if roll_bonus(self.rng, s):
            upcoming = self._game_at(s.current_index + 1)
            bonus = generate_bonus_round(self.rng, self.catalog,
                                         exclude_id=upcoming.id if upcoming else None)
            if bonus is not None:
                s.bonus_round = bonus
                s.has_bonus_round_occurred_in_current_block = True
                logger.info("bonus round triggered at streak %d", s.streak)
                self._save()
                return True

        if s.streak % SHOP_EVERY == 0:
            s.has_bonus_round_occurred_in_current_block = False
        s.current_index += 1
        if s.current_index >= len(s.game_order) and self.catalog:
            # endless: deal another full pass once the order runs dry
            s.game_order.extend(weighted_game_order(self.rng, self.catalog))
        s.round = RoundState(crop_positions=random_crops(self.rng))
        self._save()
        return True

    def submit_bonus_guess(self, picked_id: int) -> Optional[bool]:
        """Resolve the pending bonus round. Returns whether the pick was right."""
        s = self.state
        bonus = s.bonus_round
        if bonus is None or s.is_game_over or picked_id not in bonus.game_ids:
            return None

        correct = picked_id == bonus.target_id
        points = bonus_round_points(s.streak, s.is_hot_streak_active, correct)
        s.score += points
        s.high_score = max(s.high_score, s.score)
        s.streak += 1

        target = self._by_id.get(bonus.target_id)
        picked = self._by_id.get(picked_id)
        s.history.append(HistoryEntry(
            game_id=bonus.target_id,
            points_awarded=points,
            status="won" if correct else "lost",
            guesses=[GuessRecord(
                name=picked.name if picked else str(picked_id),
                outcome=GuessOutcome.CORRECT if correct else GuessOutcome.WRONG,
            )],
            correct_answer=target.name if target else "",
            is_bonus=True,
        ))
        s.bonus_round = None
        if s.streak % SHOP_EVERY == 0:
            s.has_bonus_round_occurred_in_current_block = False

        logger.info("bonus round %s: +%d points", "won" if correct else "missed", points)
        self._save()
        return correct

    # --- Internals ---

    def _game_at(self, index: int) -> Optional[Game]:
        order = self.state.game_order
        if 0 <= index < len(order):
            return self._by_id.get(order[index])
        return None

    def _repair_order(self) -> None:
        """
        Make a loaded run playable against the current catalog: drop ids the
        catalog no longer has, keep the index on the same slot, and deal a
        fresh order when the saved one is empty or runs out.
        """
        s = self.state
        old_order = s.game_order
        index = max(0, s.current_index)
        current_id = old_order[index] if index < len(old_order) else None

        order = [i for i in old_order if i in self._by_id]
        if len(order) != len(old_order):
            logger.warning("dropped %d unknown game ids from the saved order",
                           len(old_order) - len(order))
        # the kept games before the slot; the current game (or its successor) sits here
        index = sum(1 for i in old_order[:index] if i in self._by_id)
        if index >= len(order):
            order.extend(weighted_game_order(self.rng, self.catalog))
        s.game_order = order
        s.current_index = index

        if current_id not in self._by_id and old_order and not s.is_game_over:
            # the saved round belonged to a game that is gone
            s.round = RoundState(crop_positions=random_crops(self.rng))
        if s.bonus_round is not None and not all(i in self._by_id for i in s.bonus_round.game_ids):
            s.bonus_round = None

    def _playable_target(self) -> Optional[Game]:
        s = self.state
        if (s.is_game_over or s.bonus_round is not None or s.shop is not None
                or s.round.status is not RoundStatus.PLAYING):
            return None
        return self.current_game

    def _classify(self, target: Game, guessed: Optional[Game], name: str) -> GuessOutcome:
        accepted = [target]
        if self.round.double_trouble_game_id is not None:
            double = self._by_id.get(self.round.double_trouble_game_id)
            if double is not None:
                accepted.append(double)

        if guessed is not None:
            if any(guessed.id == g.id for g in accepted):
                return GuessOutcome.CORRECT
        elif any(name.lower() == g.name.lower() for g in accepted):
            return GuessOutcome.CORRECT

        if is_same_series(name, target.name):
            return GuessOutcome.SIMILAR_NAME
        return GuessOutcome.WRONG

    def _win(self, target: Game, record: GuessRecord) -> None:
        s = self.state
        s.round.guesses.append(record)
        count = len(s.round.guesses)

        points = round_points(count, s.streak, s.is_hot_streak_active)
        s.score += points
        s.high_score = max(s.high_score, s.score)
        s.streak += 1
        s.round.status = RoundStatus.WON
        self._record(target, points, "won")
        s.hot_streak_count = next_hot_streak_count(s.hot_streak_count, count)

        self.stats.record_result(target, True, count)
        self.store.save_stats(self.stats)
        logger.info("round won: game=%d guesses=%d points=%d streak=%d",
                    target.id, count, points, s.streak)

    def _miss(self, target: Game, record: GuessRecord, is_fatal: bool) -> None:
        s = self.state
        s.round.guesses.append(record)
        if not is_fatal and len(s.round.guesses) < MAX_GUESSES:
            return

        s.round.status = RoundStatus.LOST
        s.is_game_over = True
        s.hot_streak_count = 0
        self._record(target, 0, "lost")

        self.stats.record_result(target, False, len(s.round.guesses))
        self.store.save_stats(self.stats)
        logger.info("run over: game=%d score=%d streak=%d%s",
                    target.id, s.score, s.streak, " (fatal)" if is_fatal else "")

    def _record(self, target: Game, points: int, status: str) -> None:
        rnd = self.round
        self.state.history.append(HistoryEntry(
            game_id=target.id,
            points_awarded=points,
            status=status,
            guesses=list(rnd.guesses),
            lifelines_used=list(rnd.lifelines_used),
            correct_answer=target.name,
            crop_positions=list(rnd.crop_positions),
        ))

    def _reset_run(self) -> None:
        high_score = self.state.high_score
        self.state = RunState(
            high_score=high_score,
            game_order=weighted_game_order(self.rng, self.catalog),
            round=RoundState(crop_positions=random_crops(self.rng)),
        )
        logger.info("new run started (high score %d)", high_score)

    def _save(self) -> None:
        self.store.save(self.state)
