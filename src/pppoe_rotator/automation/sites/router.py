import logging

from ..engine import AutomationEngine
from .base_site import SiteFlow

logger = logging.getLogger(__name__)

ADMIN_PASSWORD_FIELD = "#admin_Password"
LOGIN_BUTTON = "#logIn_btn"
PPPOE_USERNAME_FIELD = "input[name='userName_PPPoE']"
PPPOE_PASSWORD_FIELD = "input[name='password_PPPoE']"
SAVE_BUTTON = "#Save_btn"


class RouterFlow(SiteFlow):
    """Reads and changes the PPPoE identity in the router's web admin."""

    def __init__(self, router_ip: str, admin_password: str, engine_factory, apply_wait: float = 35.0, **kwargs):
        super().__init__(engine_factory, **kwargs)
        self.router_ip = router_ip
        self.admin_password = admin_password
        self.apply_wait = apply_wait

    @property
    def login_url(self) -> str:
        return f"http://{self.router_ip}/info/Login.html"

    @property
    def internet_url(self) -> str:
        return f"http://{self.router_ip}/Internet.html"

    def _login(self, engine: AutomationEngine) -> None:
        engine.goto(self.login_url)
        self.require(engine, ADMIN_PASSWORD_FIELD, "Router password field")
        engine.type(ADMIN_PASSWORD_FIELD, self.admin_password)
        self.require(engine, LOGIN_BUTTON, "Login button")
        engine.click(LOGIN_BUTTON)
        self.settle()

    def _open_internet_settings(self, engine: AutomationEngine) -> None:
        engine.goto(self.internet_url)
        self.settle()
        self.require(engine, PPPOE_USERNAME_FIELD, "PPPoE username field")

    def inspect_active_identity(self) -> str:
        with self.session() as engine:
            self._login(engine)
            self._open_internet_settings(engine)
            current = engine.value(PPPOE_USERNAME_FIELD)
        return (current or "").strip()

    def apply_identity(self, identity_name: str, secret: str) -> bool:
        """Save a new PPPoE identity and confirm the router kept it.

        Returns:
            True if the router reports ``identity_name`` after saving
        """
        with self.session() as engine:
            self._login(engine)
            self._open_internet_settings(engine)
            self.require(engine, PPPOE_PASSWORD_FIELD, "PPPoE password field")

            engine.type(PPPOE_USERNAME_FIELD, identity_name)
            engine.type(PPPOE_PASSWORD_FIELD, secret)
            self.require(engine, SAVE_BUTTON, "Submit button")
            engine.click(SAVE_BUTTON)

            # The router drops and redials the link while applying.
            logger.info(f"Waiting {self.apply_wait:g}s for the router to apply PPPoE ID '{identity_name}'")
            self.settle(self.apply_wait)

        # Fresh login; the admin session does not survive the reconnect.
        stored = self.inspect_active_identity()

        if stored != identity_name:
            logger.warning(f"Router reports PPPoE ID '{stored}' after saving '{identity_name}'")
            return False
        return True
