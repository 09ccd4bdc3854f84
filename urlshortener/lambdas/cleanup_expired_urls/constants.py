# Diagnostic statuses for the scheduled sweep function
SUCCESS = 'success'
ERROR = 'error'
