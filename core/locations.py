"""
Cascading Country -> State -> City selection.

Countries and their top-level subdivisions come from ISO 3166 via
pycountry. Cities are bundled per state; a state without a bundled list
takes a free-text city. Countries without subdivisions are not offered,
since a state is required wherever a location is asked for.
"""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import pycountry
import yaml

logger = logging.getLogger(__name__)

DATASET_PATH = Path(__file__).parent / "data" / "locations.yaml"


class LocationDataError(Exception):
    """Raised when the location reference dataset cannot be loaded."""
    pass


def _index_dataset(raw: Dict[str, Any]) -> Dict[str, Any]:
    countries = {}
    for country in raw.get('countries') or []:
        states = {}
        for state in country.get('states') or []:
            states[str(state['code'])] = {
                'name': state['name'],
                'cities': [str(city) for city in state.get('cities') or []],
            }
        countries[str(country['code'])] = {'name': country['name'], 'states': states}
    return countries


def load_city_dataset(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the bundled city lists.

    Raises:
        LocationDataError: If the file is missing or malformed
    """
    dataset_path = path or DATASET_PATH
    try:
        with open(dataset_path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f) or {}
    except OSError as e:
        raise LocationDataError(f"Location dataset not readable at {dataset_path}: {e}")
    except yaml.YAMLError as e:
        raise LocationDataError(f"Location dataset at {dataset_path} is malformed: {e}")

    try:
        countries = _index_dataset(raw)
    except (KeyError, TypeError, AttributeError) as e:
        raise LocationDataError(f"Location dataset at {dataset_path} has an invalid entry: {e}")

    logger.info(f"Loaded city lists for {len(countries)} countries from {dataset_path}")
    return countries


def _iso_countries() -> Dict[str, Any]:
    states: Dict[str, Dict[str, Any]] = {}
    for subdivision in pycountry.subdivisions:
        if getattr(subdivision, 'parent_code', None):
            continue
        country_code, _, state_code = subdivision.code.partition('-')
        states.setdefault(country_code, {})[state_code] = {'name': subdivision.name, 'cities': []}

    countries = {}
    for country in pycountry.countries:
        name = getattr(country, 'common_name', None) or country.name
        countries[country.alpha_2] = {'name': name, 'states': states.get(country.alpha_2, {})}
    return countries


def merge_city_lists(countries: Dict[str, Any], cities: Dict[str, Any]) -> Dict[str, Any]:
    """
    Attach bundled city lists to the ISO states.

    A bundled state is matched by code, then by name, so a renamed ISO code
    still gets its cities. Bundled states ISO does not know are added.
    Countries left without any state are dropped.
    """
    for code, bundled in cities.items():
        country = countries.setdefault(code, {'name': bundled['name'], 'states': {}})
        by_name = {state['name'].casefold(): state for state in country['states'].values()}
        for state_code, state in bundled['states'].items():
            target = country['states'].get(state_code) or by_name.get(state['name'].casefold())
            if target is None:
                target = country['states'][state_code] = {'name': state['name'], 'cities': []}
            target['cities'] = list(state['cities'])

    return {code: country for code, country in countries.items() if country['states']}


@lru_cache(maxsize=None)
def load_location_dataset(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the reference dataset once per process.

    Args:
        path: Optional city list path, defaults to the bundled YAML file

    Returns:
        Mapping of country code to {'name', 'states'}; states map code to
        {'name', 'cities'}. An empty city list means free-text city.

    Raises:
        LocationDataError: If the city lists are missing or malformed
    """
    cities = load_city_dataset(path)
    countries = merge_city_lists(_iso_countries(), cities)
    logger.info(f"Loaded {len(countries)} countries with subdivisions")
    return countries


class LocationSelector:
    """
    Holds the country, state and city selected on a form.

    Setting a parent clears its children, so a city is only ever set
    together with a state and a state together with a country. Option
    lists are derived from the dataset on every access.
    """

    def __init__(self, dataset: Optional[Dict[str, Any]] = None,
                 country: str = "", state: str = "", city: str = ""):
        self.dataset = dataset if dataset is not None else load_location_dataset()
        self.country = ""
        self.state = ""
        self.city = ""
        if country:
            self.set_country(country)
        if state:
            self.set_state(state)
        if city:
            self.set_city(city)

    def set_country(self, code: Optional[str]) -> None:
        self.country = code or ""
        self.state = ""
        self.city = ""

    def set_state(self, code: Optional[str]) -> None:
        if code and not self.country:
            raise ValueError("Select a country before choosing a state")
        self.state = code or ""
        self.city = ""

    def set_city(self, name: Optional[str]) -> None:
        if name and not self.state:
            raise ValueError("Select a state before choosing a city")
        self.city = name or ""

    def _states(self) -> Dict[str, Any]:
        if not self.country:
            return {}
        return self.dataset.get(self.country, {}).get('states', {})

    @property
    def country_options(self) -> List[Dict[str, str]]:
        return [
            {'value': code, 'label': country['name']}
            for code, country in sorted(self.dataset.items(), key=lambda item: item[1]['name'])
        ]

    @property
    def state_options(self) -> List[Dict[str, str]]:
        return [{'value': code, 'label': state['name']} for code, state in self._states().items()]

    @property
    def city_options(self) -> List[Dict[str, str]]:
        if not self.state:
            return []
        state = self._states().get(self.state)
        if state is None:
            return []
        return [{'value': city, 'label': city} for city in state['cities']]

    @property
    def city_is_free_text(self) -> bool:
        """True once a state is chosen that has no city list to pick from."""
        return bool(self.state) and not self.city_options

    def label_for(self, level: str) -> str:
        """Display name of the current selection at 'country', 'state' or 'city'."""
        if level == 'country':
            return self.dataset.get(self.country, {}).get('name', self.country)
        if level == 'state':
            return self._states().get(self.state, {}).get('name', self.state)
        if level == 'city':
            return self.city
        raise ValueError(f"Unknown location level: {level}")

    def as_form_values(self) -> Dict[str, str]:
        return {'country': self.country, 'state': self.state, 'city': self.city}

    def __repr__(self) -> str:
        return f"LocationSelector(country={self.country!r}, state={self.state!r}, city={self.city!r})"
