"""
ICP Lead Scorer - Usage Examples
================================
This file demonstrates how to use the ICP Lead Scorer
both programmatically and via the API.
"""

# =============================================================================
# EXAMPLE 1: Direct Scoring (Programmatic)
# =============================================================================

def example_direct_usage():
    """Score one business against the built-in profiles"""
    from icp_scorer.stages.stage3_scoring import calculate_icp_score
    from icp_scorer.models.schemas import Business, WebsiteAnalysis
    from icp_scorer.models.icp_config import get_default_icp_configs

    business = Business(
        business_id="pizzeria-1",
        name="La Pizzería de Palermo",
        category="Pizza Place",
        types=["restaurant", "meal_delivery"],
        num_locations=3,
        website="https://pizzeriapalermo.com.ar",
        address="Av. Santa Fe 3200, Buenos Aires, Argentina",
        website_analysis=WebsiteAnalysis(
            has_seo=True,
            has_whatsapp=True,
            has_reservation=False,
            has_direct_ordering=True,
            has_third_party_delivery=True,
        ),
    )

    print("=" * 60)
    print(f"SCORING BUSINESS: {business.name}")
    print("=" * 60)

    for config in get_default_icp_configs():
        result = calculate_icp_score(business, config)
        print(f"\n{config.name} ({config.type.value}): {result.score}/{result.max_score}")
        for factor, entry in result.breakdown.items():
            print(
                f"  {factor.value:<28} {entry.score_percent:>6.2f}% "
                f"x {entry.weight:<4} = {entry.contribution:.2f}  ({entry.value})"
            )

    return business


# =============================================================================
# EXAMPLE 2: Website Analysis
# =============================================================================

def example_website_analysis():
    """Extract website signals from homepage HTML"""
    from icp_scorer.stages.stage1_website import WebsiteAnalysisStage

    html = """
    <html>
      <head>
        <title>Bar Notable</title>
        <meta name="description" content="Cocktails y tapas en San Telmo">
      </head>
      <body>
        <h1>Bar Notable</h1>
        <a href="https://wa.me/5491100000000">WhatsApp</a>
        <a href="https://www.opentable.com/bar-notable">Reservá tu mesa</a>
        <footer>Todos los derechos reservados</footer>
      </body>
    </html>
    """

    analysis = WebsiteAnalysisStage().analyze(html, "https://barnotable.com.ar")

    print("\n--- Website Analysis ---")
    print(f"  SEO:            {analysis.has_seo}")
    print(f"  WhatsApp:       {analysis.has_whatsapp}")
    print(f"  Reservation:    {analysis.has_reservation}")
    print(f"  Direct order:   {analysis.has_direct_ordering}")
    print(f"  Third party:    {analysis.has_third_party_delivery}")

    return analysis


# =============================================================================
# EXAMPLE 3: Engine with Bulk Scoring
# =============================================================================

def example_bulk_scoring():
    """Register businesses and score them all against both profiles"""
    from icp_scorer.engine import ICPScoringEngine
    from icp_scorer.models.schemas import Business

    engine = ICPScoringEngine()

    businesses = [
        Business(business_id="b1", name="Sushi Club", category="Sushi", num_locations=14, country="Argentina"),
        Business(business_id="b2", name="Café Tortoni", category="Café", num_locations=1, country="Argentina"),
        Business(business_id="b3", name="Gelato Roma", category="Heladería", num_locations=4, country="Italy"),
    ]
    for business in businesses:
        engine.businesses.upsert(business)

    summary = engine.score_batch("both")

    print("\n--- Bulk Scoring ---")
    print(f"  Processed: {summary.processed}/{summary.total} (errors: {summary.errors})")
    for business in engine.businesses.list():
        scores = ", ".join(
            f"{icp_type.value}={stored.score}" for icp_type, stored in business.icp_scores.items()
        )
        print(f"  {business.name:<14} {scores}")

    return summary


# =============================================================================
# EXAMPLE 4: API Usage (HTTP)
# =============================================================================

def example_api_usage():
    """Call the running API server (start it with `python main.py`)"""
    import httpx

    base_url = "http://localhost:8000"

    with httpx.Client(base_url=base_url, timeout=30) as client:
        configs = client.get("/api/icp-configs").json()
        print(f"\nConfigured profiles: {[c['name'] for c in configs]}")

        client.post("/api/businesses", json={
            "business_id": "bar-1",
            "name": "Antares Palermo",
            "category": "Craft Beer Bar",
            "num_locations": 6,
            "country": "Argentina",
        })

        response = client.post(
            "/api/icp-score/bar-1",
            json={"icp_type": "independent", "refresh_analysis": False},
        )
        result = response.json()
        print(f"Antares Palermo (independent): {result['score']}/10")


if __name__ == "__main__":
    example_direct_usage()
    example_website_analysis()
    example_bulk_scoring()
