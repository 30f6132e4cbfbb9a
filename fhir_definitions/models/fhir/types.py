from enum import Enum


class ResourceType(Enum):
    STRUCTURE_DEFINITION = "StructureDefinition"
    VALUE_SET = "ValueSet"
    CODE_SYSTEM = "CodeSystem"
    CONCEPT_MAP = "ConceptMap"
    SEARCH_PARAMETER = "SearchParameter"
    DATA_ELEMENT = "DataElement"
    OPERATION_DEFINITION = "OperationDefinition"
    NAMING_SYSTEM = "NamingSystem"
    CAPABILITY_STATEMENT = "CapabilityStatement"
    COMPARTMENT_DEFINITION = "CompartmentDefinition"


class DistributionFile(Enum):
    PROFILES_RESOURCES = "profiles-resources.json"
    PROFILES_TYPES = "profiles-types.json"
    PROFILES_OTHERS = "profiles-others.json"
    VALUE_SETS = "valuesets.json"
    CONCEPT_MAPS = "conceptmaps.json"
    DATA_ELEMENTS = "dataelements.json"
    SEARCH_PARAMETERS = "search-parameters.json"
    VERSION_INFO = "version.info"
