"""Fixed user-facing command messages."""

COMMAND_NOT_FOUND = "Command not found: {verb}. Type 'help' for a list of commands."
NO_PRIORITY_SITES = (
    'Error: No priority sites to scrape. Please add a site using the '
    '"add-site <url>" command first.'
)
ERROR_PREFIX = "Error: "

USAGE = {
    "add-site": "Usage: add-site <url1> [url2]...",
    "remove-site": "Usage: remove-site <url>",
    "add-exclude": "Usage: add-exclude <url1> [url2]...",
    "remove-exclude": "Usage: remove-exclude <url>",
    "scrape": "Usage: scrape <query>",
    "set-morning-query": "Usage: set-morning-query <query>",
}

PRIORITY_ADDED = "Priority sites added: {sites}"
PRIORITY_DUPLICATES = "Sites already existed: {sites}"
PRIORITY_LIST_TITLE = "Priority sites:"
PRIORITY_LIST_EMPTY = "No priority sites saved."
PRIORITY_REMOVED = "Site removed: {site}"
PRIORITY_NOT_FOUND = "Site not found in priority list: {site}"
PRIORITY_CLEARED = "All priority sites have been cleared."
PRIORITY_ALREADY_EMPTY = "Priority site list is already empty."

EXCLUDED_ADDED = "Excluded sites added: {sites}"
EXCLUDED_DUPLICATES = "Sites already excluded: {sites}"
EXCLUDED_LIST_TITLE = "Excluded sites:"
EXCLUDED_LIST_EMPTY = "No sites excluded."
EXCLUDED_REMOVED = "Site removed from exclusion list: {site}"
EXCLUDED_NOT_FOUND = "Site not found in exclusion list: {site}"
EXCLUDED_CLEARED = "Exclusion list has been cleared."
EXCLUDED_ALREADY_EMPTY = "Exclusion list is already empty."

MORNING_QUERY_SET = 'Morning query set to: "{query}"'

QUERY_TITLE = 'Query: "{query}"'
MORNING_TITLE = 'Morning Scrape: "{query}"'

# (usage, description) pairs grouped by section, in display order
HELP_SECTIONS = [
    (
        "Site Management",
        [
            ("add-site <url1> [url2]...", "Adds site(s) to the priority list."),
            ("list-sites", "Lists all priority websites."),
            ("remove-site <url>", "Removes a site from the priority list."),
            ("clear-sites", "Clears the priority site list."),
        ],
    ),
    (
        "Exclusion Management",
        [
            ("add-exclude <url1> [url2]...", "Adds site(s) to the exclusion list."),
            ("list-excludes", "Lists all excluded websites."),
            ("remove-exclude <url>", "Removes a site from the exclusion list."),
            ("clear-excludes", "Clears the exclusion list."),
        ],
    ),
    (
        "Scraping",
        [
            ("scrape <query>", "Scrapes saved sites for the given query."),
            ("set-morning-query <query>", "Sets the default query for the morning scrape."),
            ("scrape-morning", "Runs the predefined morning scrape query."),
        ],
    ),
    (
        "General",
        [
            ("help", "Shows this help message."),
            ("clear", "Clears the terminal screen."),
            ("exit", "Exits the application."),
        ],
    ),
]
