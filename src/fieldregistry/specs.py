"""
Built-in field kinds and the predefined field library.

Kind shape per type id:
{
  "label": "Dropdown list",
  "requires_options": True,
  "aliases": ["token1", "token2", ...]
}

Predefined field shape: the keys of formstate.Field (id, name, label, type,
required, placeholder, options).
"""

BUILTIN_KINDS = {
    "text": {
        "label": "Text",
        "requires_options": False,
        "aliases": ["string", "short_text", "input", "texte"],
    },
    "email": {
        "label": "Email",
        "requires_options": False,
        "aliases": ["mail", "e-mail", "e_mail"],
    },
    "tel": {
        "label": "Phone",
        "requires_options": False,
        "aliases": ["phone", "telephone", "mobile"],
    },
    "select": {
        "label": "Dropdown list",
        "requires_options": True,
        "aliases": ["dropdown", "choice", "list", "enum"],
    },
    "textarea": {
        "label": "Long text",
        "requires_options": False,
        "aliases": ["long_text", "paragraph", "multiline"],
    },
}

PREDEFINED_FIELDS = [
    {"id": "firstName", "name": "firstName", "label": "First name", "type": "text", "required": True},
    {"id": "lastName", "name": "lastName", "label": "Last name", "type": "text", "required": True},
    {"id": "email", "name": "email", "label": "Email", "type": "email", "required": True},
    {"id": "phone", "name": "phone", "label": "Phone", "type": "tel", "required": False},
    {"id": "company", "name": "company", "label": "Company", "type": "text", "required": False},
    {"id": "jobTitle", "name": "jobTitle", "label": "Job title", "type": "text", "required": False},
    {"id": "country", "name": "country", "label": "Country", "type": "text", "required": False},
]

# "Restore defaults" target, in display order
DEFAULT_FIELD_IDS = ["firstName", "lastName", "email"]

CUSTOM_FIELD_LABEL = "New custom field"
