API_PREFIX = '/api/v1.0/moviebooking'

# Movie inventory administration
MOVIE_LIST_ALL = '/all'
MOVIE_SEARCH = '/movies/search/{movie_name}'
MOVIE_ADD = '/movies/add'
MOVIE_SET_CAPACITY = '/{movie_name}/theatres/{theatre}/tickets'
MOVIE_DELETE = '/{movie_name}/delete/{theatre}'

# Booking
BOOKING_CREATE = '/{movie_name}/add'
BOOKING_RECOMPUTE_STATUS = '/{movie_name}/update/{theatre}'
BOOKING_BOOKED_INFO = '/{movie_name}/booked/{theatre}'
