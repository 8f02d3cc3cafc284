"""Back-office pricing service for a stair and millwork shop."""
