# backend/tour_planner/services/attraction_service.py

from typing import List

from pydantic import BaseModel


class Attraction(BaseModel):
    id: str
    name: str
    category: str
    description: str
    rating: float
    image: str
    duration: str
    wait_time: str


_IMG = "https://images.pexels.com/photos/{}?auto=compress&cs=tinysrgb&w=400"

PARIS_ATTRACTIONS: List[Attraction] = [
    Attraction(id="1", name="Eiffel Tower", category="Monument",
               description="Iconic iron lattice tower and symbol of Paris", rating=4.6,
               image=_IMG.format("338515/pexels-photo-338515.jpeg"), duration="2-3 hours", wait_time="30-60 min"),
    Attraction(id="2", name="Louvre Museum", category="Museum",
               description="World's largest art museum and historic palace", rating=4.5,
               image=_IMG.format("2675266/pexels-photo-2675266.jpeg"), duration="3-4 hours", wait_time="45-90 min"),
    Attraction(id="3", name="Notre-Dame Cathedral", category="Historic Site",
               description="Medieval Catholic cathedral and Gothic architecture masterpiece", rating=4.4,
               image=_IMG.format("1850619/pexels-photo-1850619.jpeg"), duration="1-2 hours", wait_time="15-30 min"),
    Attraction(id="4", name="Arc de Triomphe", category="Monument",
               description="Monumental arch honoring French military victories", rating=4.5,
               image=_IMG.format("1530259/pexels-photo-1530259.jpeg"), duration="1-2 hours", wait_time="20-40 min"),
    Attraction(id="5", name="Champs-Élysées", category="Street",
               description="Famous avenue lined with shops, cafés, and theaters", rating=4.3,
               image=_IMG.format("2363/france-landmark-lights-night.jpg"), duration="2-3 hours", wait_time="No wait"),
    Attraction(id="6", name="Sacré-Cœur Basilica", category="Religious Site",
               description="Roman Catholic church atop Montmartre hill", rating=4.4,
               image=_IMG.format("1461974/pexels-photo-1461974.jpeg"), duration="1-2 hours", wait_time="10-25 min"),
    Attraction(id="7", name="Musée d'Orsay", category="Museum",
               description="Museum featuring world's finest collection of Impressionist art", rating=4.5,
               image=_IMG.format("2675264/pexels-photo-2675264.jpeg"), duration="2-3 hours", wait_time="20-45 min"),
    Attraction(id="8", name="Latin Quarter", category="Neighborhood",
               description="Historic area known for its student life and bohemian atmosphere", rating=4.3,
               image=_IMG.format("161901/paris-sunset-france-monument-161901.jpeg"), duration="2-4 hours", wait_time="No wait"),
    Attraction(id="9", name="Montmartre", category="Neighborhood",
               description="Historic hilltop district famous for artists and nightlife", rating=4.4,
               image=_IMG.format("2363/france-landmark-lights-night.jpg"), duration="3-4 hours", wait_time="No wait"),
    Attraction(id="10", name="Seine River Cruise", category="Experience",
               description="Scenic boat tour along the Seine River", rating=4.2,
               image=_IMG.format("1530259/pexels-photo-1530259.jpeg"), duration="1 hour", wait_time="5-15 min"),
    Attraction(id="11", name="Palace of Versailles", category="Palace",
               description="Opulent royal château and gardens", rating=4.4,
               image=_IMG.format("2675266/pexels-photo-2675266.jpeg"), duration="4-6 hours", wait_time="60-120 min"),
    Attraction(id="12", name="Sainte-Chapelle", category="Religious Site",
               description="Gothic chapel renowned for its stunning stained glass", rating=4.5,
               image=_IMG.format("1850619/pexels-photo-1850619.jpeg"), duration="45 min - 1 hour", wait_time="15-30 min"),
]


def search_attractions(term: str = "") -> List[Attraction]:
    """Case-insensitive match on name or category; empty term returns everything."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(PARIS_ATTRACTIONS)
    return [a for a in PARIS_ATTRACTIONS if needle in a.name.lower() or needle in a.category.lower()]
