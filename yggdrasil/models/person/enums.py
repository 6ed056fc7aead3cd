class Gender:
    MALE = 'Male'
    FEMALE = 'Female'
    OTHER = 'Other'
    UNKNOWN = 'Unknown'

    _ALL = (MALE, FEMALE, OTHER, UNKNOWN)
