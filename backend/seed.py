"""
backend/seed.py

Reference data loaded once at process start: projects, market indicators and
the location hierarchy used by the dashboards' cascading dropdowns.
"""

from typing import Dict, List

from backend.models import MarketIndicatorCreate, ProjectCreate

IMAGE_BASE = "https://images.unsplash.com"

SEED_PROJECTS: List[ProjectCreate] = [
    ProjectCreate(
        name="Azure Residences",
        description="Luxury residential tower with premium amenities",
        location="Downtown Dubai",
        country="United Arab Emirates",
        city="Dubai",
        district="Downtown Dubai",
        sector="Real Estate",
        sub_sector="High-rise Residential",
        project_type="Residential",
        contract_type="Design & Build",
        status="Under Construction",
        investment=28,
        expected_roi=16.2,
        size=850000,
        floors=54,
        completion_date="Q3 2025",
        image_url=f"{IMAGE_BASE}/photo-1545324418-cc1a3fa10c00",
        features=["Luxury Finishes", "Gym", "Pool", "Concierge"],
        is_luxury=True,
    ),
    ProjectCreate(
        name="Tech Hub Central",
        description="Modern commercial office complex for tech companies",
        location="Business Bay",
        country="United Arab Emirates",
        city="Dubai",
        district="Business Bay",
        sector="Real Estate",
        sub_sector="Office",
        project_type="Commercial",
        contract_type="EPC",
        status="Planning",
        investment=85,
        expected_roi=21.8,
        size=1200000,
        floors=32,
        completion_date="Q1 2027",
        image_url=f"{IMAGE_BASE}/photo-1486406146926-c627a92ad1ab",
        features=["Smart Building", "Co-working Spaces", "Tech Infrastructure", "Conference Centers"],
        is_sustainable=True,
    ),
    ProjectCreate(
        name="Coastal Resort & Spa",
        description="Luxury beachfront resort with world-class amenities",
        location="Jumeirah Beach",
        country="United Arab Emirates",
        city="Dubai",
        district="Jumeirah",
        sector="Hospitality",
        sub_sector="Resort",
        project_type="Resort",
        status="Completed",
        investment=125,
        current_roi=14.6,
        size=2000000,
        capacity=420,
        completion_date="2023",
        image_url=f"{IMAGE_BASE}/photo-1571896349842-33c89424de2d",
        features=["Private Beach", "Spa", "Multiple Restaurants", "Golf Course"],
        is_luxury=True,
        is_waterfront=True,
    ),
    ProjectCreate(
        name="Grand Shopping District",
        description="Premier retail and entertainment destination",
        location="Dubai Mall District",
        country="United Arab Emirates",
        city="Dubai",
        district="Downtown Dubai",
        sector="Retail",
        sub_sector="Shopping Mall",
        project_type="Mixed Use",
        contract_type="Lump Sum",
        status="Under Construction",
        investment=95,
        expected_roi=19.4,
        size=1500000,
        completion_date="Q4 2025",
        image_url=f"{IMAGE_BASE}/photo-1441986300917-64674bd600d8",
        features=["Retail Spaces", "Entertainment Zone", "Food Court", "Cinema"],
    ),
    ProjectCreate(
        name="Green Valley Communities",
        description="Sustainable residential development with green spaces",
        location="Dubai South",
        country="United Arab Emirates",
        city="Dubai",
        district="Dubai South",
        sector="Real Estate",
        sub_sector="Villas & Townhouses",
        project_type="Residential",
        status="Planning",
        investment=52,
        expected_roi=17.9,
        size=900000,
        completion_date="Q2 2026",
        image_url=f"{IMAGE_BASE}/photo-1560518883-ce09059eeffa",
        features=["Solar Panels", "Green Spaces", "Community Garden", "Energy Efficient"],
        is_sustainable=True,
    ),
    ProjectCreate(
        name="Innovation Tower",
        description="Premium office tower in the financial district",
        location="DIFC",
        country="United Arab Emirates",
        city="Dubai",
        district="DIFC",
        sector="Real Estate",
        sub_sector="Office",
        project_type="Commercial",
        contract_type="Design & Build",
        status="Under Construction",
        investment=135,
        expected_roi=23.1,
        size=1800000,
        floors=61,
        completion_date="Q1 2026",
        image_url=f"{IMAGE_BASE}/photo-1582407947304-fd86f028f716",
        features=["Premium Office Spaces", "Sky Lobby", "Smart Systems", "Executive Facilities"],
        is_luxury=True,
        is_sustainable=True,
    ),
    ProjectCreate(
        name="Riyadh Metro Extension",
        description="Extension of the metro network to the northern districts",
        location="King Abdullah Financial District",
        country="Saudi Arabia",
        city="Riyadh",
        district="King Abdullah Financial District",
        sector="Infrastructure",
        sub_sector="Rail",
        project_type="Transportation",
        contract_type="EPC",
        status="Tender Open",
        investment=640,
        expected_roi=9.5,
        completion_date="Q4 2028",
        features=["Driverless Trains", "Underground Stations", "Park & Ride"],
        is_sustainable=True,
    ),
    ProjectCreate(
        name="Olaya Business Towers",
        description="Twin office towers with ground-floor retail podium",
        location="Olaya",
        country="Saudi Arabia",
        city="Riyadh",
        district="Olaya",
        sector="Real Estate",
        sub_sector="Office",
        project_type="Commercial",
        contract_type="Lump Sum",
        status="Nearing Completion",
        investment=210,
        expected_roi=18.3,
        size=1650000,
        floors=45,
        built_up_area=153000,
        completion_date="Q2 2025",
        features=["Retail Podium", "Helipad", "Smart Systems"],
        is_luxury=True,
    ),
    ProjectCreate(
        name="Jeddah Corniche Hotel",
        description="Five-star waterfront hotel on the Corniche",
        location="Al Shati",
        country="Saudi Arabia",
        city="Jeddah",
        district="Al Shati",
        sector="Hospitality",
        sub_sector="Hotel",
        project_type="Hotel",
        status="Completed / Operational",
        investment=180,
        current_roi=12.4,
        size=700000,
        capacity=350,
        floors=28,
        completion_date="2022",
        features=["Sea View Rooms", "Marina Access", "Conference Center"],
        is_luxury=True,
        is_waterfront=True,
    ),
    ProjectCreate(
        name="Dammam Logistics Park",
        description="Bonded warehousing and distribution hub near the port",
        location="Second Industrial City",
        country="Saudi Arabia",
        city="Dammam",
        district="Second Industrial City",
        sector="Industrial",
        sub_sector="Logistics",
        project_type="Warehouse",
        contract_type="Design & Build",
        status="In Progress",
        investment=75,
        expected_roi=13.7,
        size=2400000,
        built_up_area=220000,
        completion_date="Q3 2026",
        features=["Cold Storage", "Rail Siding", "Customs Clearance"],
    ),
    ProjectCreate(
        name="Abu Dhabi Cultural Quarter",
        description="Museum and public realm development on Saadiyat",
        location="Saadiyat Island",
        country="United Arab Emirates",
        city="Abu Dhabi",
        district="Saadiyat Island",
        sector="Culture & Tourism",
        sub_sector="Museum",
        project_type="Mixed Use",
        contract_type="Cost Plus",
        status="On Hold",
        investment=310,
        expected_roi=7.8,
        size=1100000,
        completion_date="TBD",
        features=["Gallery Space", "Waterfront Promenade", "Amphitheater"],
        is_waterfront=True,
        is_sustainable=True,
    ),
]

SEED_MARKET_INDICATORS: List[MarketIndicatorCreate] = [
    MarketIndicatorCreate(
        title="High Opportunity",
        description="Retail gap in Business Bay",
        type="opportunity",
        value="+23%",
        value_label="demand vs supply",
        location="Business Bay",
        sector="Retail",
    ),
    MarketIndicatorCreate(
        title="Market Trend",
        description="Mixed-use developments rising",
        type="trend",
        value="+15%",
        value_label="new projects Q1",
        sector="Mixed Use",
    ),
    MarketIndicatorCreate(
        title="Market Alert",
        description="Oversupply in luxury segment",
        type="alert",
        value="-8%",
        value_label="price adjustment",
        sector="Luxury",
    ),
    MarketIndicatorCreate(
        title="Tender Pipeline",
        description="Rail tenders in Riyadh",
        type="opportunity",
        value="+31%",
        value_label="tender volume YoY",
        location="Riyadh",
        sector="Infrastructure",
        is_active=False,
    ),
]

# Location hierarchy for cascading dropdowns (not derived from projects)
COUNTRY_TO_CITIES: Dict[str, List[str]] = {
    "Saudi Arabia": ["Riyadh", "Jeddah", "Dammam", "Mecca", "Medina", "NEOM"],
    "United Arab Emirates": ["Dubai", "Abu Dhabi", "Sharjah", "Ras Al Khaimah"],
    "Qatar": ["Doha", "Lusail", "Al Wakrah"],
    "Kuwait": ["Kuwait City", "Hawalli"],
    "Bahrain": ["Manama", "Muharraq"],
    "Oman": ["Muscat", "Salalah", "Duqm"],
}

CITY_TO_DISTRICTS: Dict[str, List[str]] = {
    "Riyadh": ["King Abdullah Financial District", "Olaya", "Al Malqa", "Diplomatic Quarter"],
    "Jeddah": ["Al Shati", "Al Hamra", "Obhur"],
    "Dammam": ["Second Industrial City", "Al Faisaliyah", "Corniche"],
    "Dubai": ["Downtown Dubai", "Business Bay", "Jumeirah", "Dubai South", "DIFC", "Dubai Marina"],
    "Abu Dhabi": ["Saadiyat Island", "Yas Island", "Al Reem Island"],
    "Sharjah": ["Al Majaz", "Aljada"],
    "Doha": ["West Bay", "The Pearl", "Msheireb"],
    "Lusail": ["Marina District", "Fox Hills"],
    "Muscat": ["Qurum", "Al Mouj"],
}
