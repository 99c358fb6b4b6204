"""Reusable UI flows for the JWT Pizza scenarios."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from pizza_ui_tests.browser import Browser
from pizza_ui_tests.mock_data import MOCK_PASSWORD


@dataclass
class RegistrationFormData:
    name: str
    email: str
    password: str = MOCK_PASSWORD

    @property
    def initials(self) -> str:
        return "".join(part[0].upper() for part in self.name.split() if part)


@dataclass
class FranchiseFormData:
    name: str
    admin_email: str


async def login_via_form(browser: Browser, email: str, password: str = MOCK_PASSWORD) -> None:
    """Fill and submit the login form (placeholder based, works on /login and /payment/login)."""
    await browser.fill_placeholder("Email address", email)
    await browser.fill_placeholder("Password", password)
    await browser.click_role("button", "Login")


async def login_via_labels(browser: Browser, email: str, password: str) -> None:
    await browser.fill_label("Email address", email)
    await browser.fill_label("Password", password)
    await browser.click_role("button", "Login")


async def register_via_form(browser: Browser, data: RegistrationFormData) -> None:
    await browser.goto("/register")
    await browser.fill_placeholder("Full name", data.name)
    await browser.fill_placeholder("Email address", data.email)
    await browser.fill_placeholder("Password", data.password)
    await browser.click_role("button", "Register")


async def logout(browser: Browser) -> None:
    await browser.click_role("link", "Logout")
    await browser.wait_for_url(r"/$")


async def place_order(browser: Browser, store: str, pizzas: List[str]) -> None:
    """From /menu: pick a store, add pizzas and check out."""
    # Stores arrive asynchronously from the franchise listing
    await browser.expect_count(browser.page.locator("select option", has_text=store), 1, f"store option {store!r}")
    await browser.select_label(store)
    for pizza in pizzas:
        await browser.click_text(pizza)
    await browser.click_role("button", "Checkout")


async def create_store(browser: Browser, name: str) -> None:
    """From the franchise dashboard: create a store and return to the dashboard."""
    await browser.click_role("button", "Create store")
    await browser.wait_for_url(r"/create-store$")
    await browser.fill_placeholder("store name", name)
    await browser.click_role("button", "Create")
    await browser.wait_for_url(r"/franchise-dashboard$")


async def close_store(browser: Browser, name: str) -> None:
    await browser.click(browser.row_button(name, "Close"), f"close button for store {name!r}")
    await browser.wait_for_url(r"/close-store$")
    await browser.click_role("button", "Close")
    await browser.wait_for_url(r"/franchise-dashboard$")


async def create_franchise(browser: Browser, data: FranchiseFormData) -> None:
    """From the admin dashboard: create a franchise and return to the dashboard."""
    await browser.click_role("button", "Add Franchise")
    await browser.wait_for_url(r"/create-franchise$")
    await browser.fill_placeholder("franchise name", data.name)
    await browser.fill_placeholder("franchisee admin email", data.admin_email)
    await browser.click_role("button", "Create")
    await browser.wait_for_url(r"/admin-dashboard$")


async def close_franchise(browser: Browser, name: str) -> None:
    await browser.click(browser.row_button(name, "Close"), f"close button for franchise {name!r}")
    await browser.wait_for_url(r"/close-franchise$")
    await browser.click_role("button", "Close")
    await browser.wait_for_url(r"/admin-dashboard$")
