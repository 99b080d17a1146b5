from design_crm.formatting import (
    build_list_email,
    build_selection_email,
    format_contact_line,
)
from design_crm.models import Contact, ContactList


def contact(**overrides):
    data = {
        "id": 1,
        "first_name": "Ada",
        "last_name": "Lin",
        "role": "Product Designer",
        "company": "Acme",
    }
    data.update(overrides)
    return Contact(**data)


def test_contact_line_without_links():
    assert format_contact_line(contact()) == "• Ada Lin — Product Designer at Acme"


def test_contact_line_with_links_in_order():
    line = format_contact_line(
        contact(linkedin="https://li/ada", portfolio="https://ada.design")
    )
    assert line.endswith(" | LinkedIn: https://li/ada | Portfolio: https://ada.design")


def test_selection_html_lists_each_contact():
    content = build_selection_email(
        "Hello", [contact(), contact(id=2, first_name="Bo", portfolio="https://bo.io")]
    )
    assert content.html.count("<li>") == 2
    assert '<a href="https://bo.io">Portfolio</a>' in content.html
    assert "LinkedIn" not in content.html


def test_html_escapes_user_values():
    content = build_selection_email(
        "<script>x</script>", [contact(company="A&B <Studio>")]
    )
    assert "<script>" not in content.html
    assert "A&amp;B &lt;Studio&gt;" in content.html


def test_list_email_sections():
    contact_list = ContactList(id=1, name="Top Picks", description="For Q3 hiring")
    members = [contact(notes="Met at Config"), contact(id=2, first_name="Bo")]

    content = build_list_email(contact_list, members, "Have a look")

    assert content.text.startswith("Top Picks\nFor Q3 hiring\nHave a look\n")
    assert "Design Talent (2 contacts):" in content.text
    assert "Notes: Met at Config" in content.text
    assert content.text.count("---") == 2
    assert content.text.endswith("Sent from Design CRM")

    assert "<h1" in content.html and "Top Picks" in content.html
    assert "font-style: italic;\">Met at Config</p>" in content.html
    assert "Sent from Design CRM" in content.html


def test_list_email_without_optional_parts():
    content = build_list_email(ContactList(id=1, name="Empty"), [])
    assert content.text.startswith("Empty\n\nDesign Talent (0 contacts):")
    assert "font-style: italic" not in content.html
