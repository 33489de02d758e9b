"""Tests for company page parsing."""

from scrapling.parser import Adaptor

from linklion.parsers.company_parser import parse_company_profile

COMPANY_HTML = """
<html><body><main>
<section class="org-top-card">
  <h1 class="org-top-card-summary__title">Acme Corp</h1>
  <p class="org-top-card-summary__tagline">We make everything</p>
  <div class="org-top-card-summary-info-list__info-item">Software Development</div>
  <div class="org-top-card-summary-info-list__info-item">12,345 followers</div>
</section>
<section class="org-page-details-module__card-spacing">
  <p class="break-words white-space-pre-wrap">Acme builds tools for builders.</p>
  <dl>
    <dt>Website</dt><dd><a href="https://acme.example.com">https://acme.example.com</a></dd>
    <dt>Industry</dt><dd>Software Development</dd>
    <dt>Company size</dt><dd>1,001-5,000 employees</dd><dd>2,345 associated members</dd>
    <dt>Headquarters</dt><dd>Berlin, Germany</dd>
    <dt>Founded</dt><dd>2001</dd>
    <dt>Specialties</dt><dd>Rockets, anvils, and magnets</dd>
  </dl>
</section>
</main></body></html>
"""

GUEST_HTML = """
<html><body><main>
<section class="top-card-layout">
  <h1 class="top-card-layout__title">Initech</h1>
  <h4 class="top-card-layout__second-subline">Software that works</h4>
  <h3 class="top-card-layout__first-subline">IT Services · Austin, TX · 4,567 followers</h3>
</section>
<section class="about-us">
  <p data-test-id="about-us__description">Initech makes TPS report software.</p>
  <div data-test-id="about-us__industry"><dt>Industry</dt><dd>IT Services and IT Consulting</dd></div>
  <div data-test-id="about-us__size"><dt>Company size</dt><dd>51-200 employees</dd></div>
  <div data-test-id="about-us__foundedOn"><dt>Founded</dt><dd>1999</dd></div>
</section>
<a class="face-pile__cta" href="#">View all 180 employees</a>
</main></body></html>
"""


def _page(html: str) -> Adaptor:
    return Adaptor(html, url="https://www.linkedin.com/company/acme/about/")


def test_parse_company_top_card():
    company = parse_company_profile(_page(COMPANY_HTML), "acme")

    assert company.slug == "acme"
    assert company.name == "Acme Corp"
    assert company.tagline == "We make everything"
    assert company.about == "Acme builds tools for builders."
    assert company.follower_count == "12,345"


def test_parse_company_definition_list():
    company = parse_company_profile(_page(COMPANY_HTML), "acme")

    assert company.website == "https://acme.example.com"
    assert company.industry == "Software Development"
    assert company.company_size == "1,001-5,000 employees"
    assert company.headquarters == "Berlin, Germany"
    assert company.founded == "2001"
    assert company.specialties == ["Rockets", "anvils", "magnets"]
    assert company.employee_count == "2,345"


def test_parse_guest_company_page():
    company = parse_company_profile(_page(GUEST_HTML), "initech")

    assert company.name == "Initech"
    assert company.tagline == "Software that works"
    assert company.about == "Initech makes TPS report software."
    assert company.industry == "IT Services and IT Consulting"
    assert company.company_size == "51-200 employees"
    assert company.founded == "1999"
    assert company.follower_count == "4,567"
    assert company.employee_count == "180"
    assert company.website is None


def test_missing_fields_stay_empty():
    company = parse_company_profile(_page("<html><body><h1>Solo</h1></body></html>"), "solo")
    assert company.name == "Solo"
    assert company.specialties == []
    assert company.industry is None
    assert company.employee_count is None
