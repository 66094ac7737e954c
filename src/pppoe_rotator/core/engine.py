import logging
from typing import Optional

from .collaborators import UsageProbe, IdentityInspector, IdentitySwitcher, Notifier
from .decisions import (
    ApplyOutcome,
    ApplyStatus,
    DecisionKind,
    RotationDecision,
    RotationOutcome,
)
from .models import CandidateSet, Identity, Thresholds, UsageReading
from . import messages

logger = logging.getLogger(__name__)

# Never a real PPPoE secret; applying it makes the link fail authentication.
DEFAULT_DISABLE_SECRET = "DISABLED_EXCEEDED_LIMIT"


class RotationEngine:
    """Runs one identity-rotation decision cycle.

    The engine holds no state between cycles. Collaborators are called one at
    a time, and each notification is sent only after the step it reports on
    has resolved.
    """

    def __init__(
        self,
        probe: UsageProbe,
        switcher: IdentitySwitcher,
        notifier: Notifier,
        inspector: Optional[IdentityInspector] = None,
        disable_secret: str = DEFAULT_DISABLE_SECRET,
    ):
        self.probe = probe
        self.switcher = switcher
        self.notifier = notifier
        self.inspector = inspector
        self.disable_secret = disable_secret

    def run_cycle(self, candidates: CandidateSet, thresholds: Thresholds) -> RotationOutcome:
        """Ask the router which identity is active, then run one decision."""
        if self.inspector is None:
            raise RuntimeError("run_cycle needs an IdentityInspector; use run() with an explicit name")
        active_name = self.inspector.inspect_active_identity().strip()
        logger.info(f"Currently running PPPoE ID from router: '{active_name}'")
        return self.run(active_name, candidates, thresholds)

    def run(self, active_identity_name: str, candidates: CandidateSet, thresholds: Thresholds) -> RotationOutcome:
        """Decide and execute no-op, switch or disable for the active identity.

        Errors from probing the active identity propagate and nothing is
        notified. Errors from probing other candidates mark them unavailable.
        """
        index = candidates.index_of(active_identity_name)
        if index is None:
            logger.warning(
                f"Active PPPoE ID '{active_identity_name}' is not in the configured pool "
                f"({', '.join(candidates.names())}). No action taken."
            )
            return RotationOutcome(decision=RotationDecision.no_action())

        active = candidates[index]
        logger.info(f"PPPoE ID '{active.name}' is currently running.")

        minutes = self.probe.probe_usage(active.name, active.secret)
        usage = UsageReading(identity_name=active.name, minutes=minutes).minutes
        logger.info(f"Current usage: {usage} minutes")
        outcome = RotationOutcome(decision=RotationDecision.no_action(), active=active, active_usage=usage)

        if usage <= thresholds.switch:
            logger.info(f"Total use within limit for '{active.name}'. No action taken.")
            self._notify(*messages.status_ok(active.name, usage))
            return outcome

        logger.info(
            f"Total use exceeded for '{active.name}' ({usage} > {thresholds.switch} minutes). "
            "Looking for next available ID..."
        )
        replacement = self._find_replacement(candidates, index, thresholds, outcome)

        if replacement is not None:
            outcome.decision = RotationDecision.switch_to(replacement)
        elif usage > thresholds.disable:
            outcome.decision = RotationDecision.disable(active)
        else:
            outcome.decision = RotationDecision.no_identity_available()

        self._execute(outcome, thresholds)
        return outcome

    def _find_replacement(
        self,
        candidates: CandidateSet,
        index: int,
        thresholds: Thresholds,
        outcome: RotationOutcome,
    ) -> Optional[Identity]:
        # First fit in cyclic order after the active identity.
        for candidate in candidates.cyclic_after(index):
            logger.info(f"Checking '{candidate.name}'...")
            outcome.probed.append(candidate.name)
            try:
                minutes = self.probe.probe_usage(candidate.name, candidate.secret)
                reading = UsageReading(identity_name=candidate.name, minutes=minutes)
            except Exception as e:
                logger.warning(f"Error checking '{candidate.name}': {e}")
                outcome.unavailable[candidate.name] = str(e)
                continue

            outcome.readings.append(reading)
            if minutes <= thresholds.available:
                logger.info(f"'{candidate.name}' is available (usage: {minutes} minutes <= {thresholds.available})")
                return candidate
            logger.debug(f"'{candidate.name}' also exceeded limit ({minutes} minutes)")

        logger.warning(f"All PPPoE IDs have exceeded the {thresholds.available} minute limit!")
        return None

    def _apply(self, identity: Identity, secret: str) -> ApplyOutcome:
        try:
            accepted = self.switcher.apply_identity(identity.name, secret)
        except Exception as e:
            logger.error(f"Error applying PPPoE ID '{identity.name}': {e}")
            return ApplyOutcome(ApplyStatus.FAILED, error=str(e))
        if accepted:
            return ApplyOutcome(ApplyStatus.SUCCESS)
        logger.warning(f"Router did not accept PPPoE ID '{identity.name}'")
        return ApplyOutcome(ApplyStatus.REJECTED)

    def _execute(self, outcome: RotationOutcome, thresholds: Thresholds) -> None:
        decision = outcome.decision
        active = outcome.active
        usage = outcome.active_usage

        if decision.kind == DecisionKind.SWITCH:
            target = decision.target
            logger.info(f"Switching from '{active.name}' to '{target.name}'...")
            outcome.applied = self._apply(target, target.secret)
            if outcome.applied.status == ApplyStatus.SUCCESS:
                logger.info(f"Successfully switched to '{target.name}'.")
                self._notify(*messages.switched(active.name, target.name, usage))
            elif outcome.applied.status == ApplyStatus.REJECTED:
                self._notify(*messages.switch_rejected(active.name, target.name))
            else:
                self._notify(*messages.switch_error(outcome.applied.error))

        elif decision.kind == DecisionKind.DISABLE:
            logger.warning(
                f"Current ID '{active.name}' has {usage} minutes (>{thresholds.disable}). "
                "Disabling PPPoE connection..."
            )
            outcome.applied = self._apply(active, self.disable_secret)
            if outcome.applied.ok:
                logger.info("PPPoE connection disabled to prevent further usage.")
                self._notify(*messages.disabled(active.name, usage, thresholds))
            else:
                self._notify(*messages.disable_failed(usage, outcome.applied.error))

        elif decision.kind == DecisionKind.NO_IDENTITY_AVAILABLE:
            self._notify(*messages.no_identity_available(active.name, usage, thresholds))

    def _notify(self, title: str, body: str) -> None:
        try:
            self.notifier.notify(title, body)
        except Exception as e:
            # Delivery problems must not change the cycle's result.
            logger.warning(f"Notification '{title}' could not be sent: {e}")
