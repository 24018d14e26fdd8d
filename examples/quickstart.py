# Copyright (c) mailchimp-newsletter contributors.
# Licensed under the MIT license.

"""
Walk a MailChimp account: the default list, its members and interests, and
the latest campaigns.

Reads ``MAILCHIMP_API_KEY`` and ``MAILCHIMP_DEFAULT_LIST_ID`` from the
environment; prompts for them when missing.
"""

import logging
import os
import sys
from pathlib import Path

# Add src to PYTHONPATH for local runs
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from mailchimp_newsletter.client import MailChimpClient
from mailchimp_newsletter.core.config import MailChimpConfig
from mailchimp_newsletter.core.errors import ApiError, MailChimpError
from mailchimp_newsletter.models.campaigns import NewsletterCampaign
from mailchimp_newsletter.models.lists import NewsletterListMember


def log_call(call: str) -> None:
    print({"call": call})


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    env = dict(os.environ)
    if not env.get("MAILCHIMP_API_KEY"):
        env["MAILCHIMP_API_KEY"] = input("Enter MailChimp API key (e.g. 0123...-us10): ").strip()
    if not env.get("MAILCHIMP_DEFAULT_LIST_ID"):
        env["MAILCHIMP_DEFAULT_LIST_ID"] = input("Enter the id of the list to inspect: ").strip()
    if not env["MAILCHIMP_API_KEY"] or not env["MAILCHIMP_DEFAULT_LIST_ID"]:
        print("API key and list id are required; exiting.")
        return 1

    with MailChimpClient(config=MailChimpConfig.from_env(env)) as client:
        try:
            log_call("client.default_list()")
            lst = client.default_list()
            if lst is None:
                print("List not found.")
                return 1
            print(f"List {lst['name']!r} created {lst['date_created']}")
            print(f"Dashboard: {lst.remote_path()}")

            log_call("client.records(NewsletterListMember, parent=lst).paginate(per_page=5)")
            page = client.records(NewsletterListMember, parent=lst).paginate(per_page=5)
            for member in page:
                print(f"  {member['email_address']:<40} {member['status']}")

            log_call("lst.subscribers.to_dataframe(...)")
            frame = lst.subscribers.to_dataframe(["email_address", "status", "timestamp_opt"])
            print(frame.head())

            log_call("lst.interest_categories")
            for category in lst.interest_categories:
                names = ", ".join(interest["name"] for interest in category.interests)
                print(f"  {category['title']}: {names}")

            log_call("client.records(NewsletterCampaign).list(count=5)")
            for campaign in client.records(NewsletterCampaign).list(count=5):
                print(f"  {campaign['title']!r} status={campaign['status']} opens={campaign['opens']}")
        except ApiError as exc:
            print(f"MailChimp request failed ({exc.subcode}): {exc.error}")
            return 1
        except MailChimpError as exc:
            print(f"{exc.code}: {exc.message}")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
