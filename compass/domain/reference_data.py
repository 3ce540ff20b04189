from __future__ import annotations

ASSESSMENT_DEFINITIONS = [
    {
        "title": "Personality Profile",
        "category": "personality",
        "description": "How you recharge, decide, collaborate and respond to pressure.",
        "duration_minutes": 10,
    },
    {
        "title": "Strengths Discovery",
        "category": "strengths",
        "description": "The natural talents that show up in the things you already do.",
        "duration_minutes": 8,
    },
    {
        "title": "Interest Explorer",
        "category": "interests",
        "description": "Areas that could hold your attention beyond your current hobbies.",
        "duration_minutes": 8,
    },
    {
        "title": "Core Values",
        "category": "values",
        "description": "What matters most to you when choices get hard.",
        "duration_minutes": 8,
    },
    {
        "title": "Cognitive Skills",
        "category": "cognitive_skills",
        "description": "How you think, learn and solve problems.",
        "duration_minutes": 7,
    },
    {
        "title": "Learning Style",
        "category": "learning_style",
        "description": "The study and practice habits that work best for you.",
        "duration_minutes": 6,
    },
]

CAREER_FIELDS = [
    {
        "title": "Software Engineering",
        "description": "Designing, building and maintaining software systems.",
        "category": "Technology",
        "required_strengths": ["analytical_thinking", "problem_solving", "organization"],
        "personality_match": ["conscientiousness", "openness"],
        "academic_requirements": {"preferred_subjects": ["Mathematics", "Computer Science"]},
    },
    {
        "title": "Data Science",
        "description": "Turning data into decisions with statistics and machine learning.",
        "category": "Technology",
        "required_strengths": ["analytical_thinking", "communication"],
        "personality_match": ["openness", "conscientiousness"],
        "academic_requirements": {"preferred_subjects": ["Mathematics", "Statistics"]},
    },
    {
        "title": "Healthcare",
        "description": "Caring for patients across clinical and allied health roles.",
        "category": "Health",
        "required_strengths": ["empathy", "communication", "organization"],
        "personality_match": ["agreeableness", "emotional_stability"],
        "academic_requirements": {"preferred_subjects": ["Biology", "Chemistry"]},
    },
    {
        "title": "Education",
        "description": "Teaching, mentoring and designing learning experiences.",
        "category": "Social",
        "required_strengths": ["communication", "empathy", "leadership"],
        "personality_match": ["extroversion", "agreeableness"],
        "academic_requirements": {},
    },
    {
        "title": "Design & Creative",
        "description": "Visual, product and experience design.",
        "category": "Creative",
        "required_strengths": ["creativity", "communication"],
        "personality_match": ["openness"],
        "academic_requirements": {"portfolio": True},
    },
    {
        "title": "Business & Finance",
        "description": "Running organisations, managing money and markets.",
        "category": "Business",
        "required_strengths": ["analytical_thinking", "leadership", "organization"],
        "personality_match": ["conscientiousness", "extroversion"],
        "academic_requirements": {"preferred_subjects": ["Economics", "Mathematics"]},
    },
    {
        "title": "Engineering",
        "description": "Mechanical, civil, electrical and other applied engineering disciplines.",
        "category": "STEM",
        "required_strengths": ["problem_solving", "analytical_thinking"],
        "personality_match": ["conscientiousness"],
        "academic_requirements": {"preferred_subjects": ["Physics", "Mathematics"]},
    },
    {
        "title": "Marketing & Communications",
        "description": "Telling stories that reach and move audiences.",
        "category": "Business",
        "required_strengths": ["creativity", "communication"],
        "personality_match": ["extroversion", "openness"],
        "academic_requirements": {},
    },
]

EDUCATION_STATUS_OPTIONS = [
    {"value": "high_school_student", "label": "High School Student"},
    {"value": "high_school_graduate", "label": "High School Graduate"},
    {"value": "university_student", "label": "University/College Student"},
    {"value": "university_graduate", "label": "University/College Graduate"},
    {"value": "professional", "label": "Working Professional"},
]

HOBBY_OPTIONS = [
    "Reading",
    "Gaming",
    "Sports",
    "Music",
    "Art/Drawing",
    "Cooking",
    "Technology",
    "Social Media",
    "Movies/TV",
    "Outdoor Activities",
    "Photography",
    "Writing",
    "Dance",
    "Volunteering",
    "Travel",
    "Fashion",
    "Fitness",
    "Learning Languages",
]

CHALLENGE_OPTIONS = [
    "Choosing a career path",
    "Academic pressure",
    "Financial concerns",
    "Social anxiety",
    "Time management",
    "Family expectations",
    "Peer pressure",
    "Self-confidence",
    "Work-life balance",
    "Technology skills",
    "Public speaking",
    "Decision making",
]

FAMILY_BACKGROUND_OPTIONS = [
    {"value": "supportive_academic", "label": "Very supportive of education and career goals"},
    {"value": "practical_focused", "label": "Focused on practical, stable career choices"},
    {"value": "creative_encouraging", "label": "Encouraging of creative and artistic pursuits"},
    {"value": "business_oriented", "label": "Business and entrepreneurship focused"},
    {"value": "independent_choice", "label": "Lets me make my own choices"},
    {"value": "traditional_expectations", "label": "Has traditional career expectations"},
]

FUTURE_GOAL_OPTIONS = [
    {"value": "get_into_university", "label": "Get into a good university/college"},
    {"value": "find_career_path", "label": "Discover my ideal career path"},
    {"value": "develop_skills", "label": "Develop specific skills and talents"},
    {"value": "start_career", "label": "Start my professional career"},
    {"value": "change_career", "label": "Change to a different career"},
    {"value": "start_business", "label": "Start my own business"},
]

WORK_ENVIRONMENT_OPTIONS = [
    {"value": "collaborative_office", "label": "Collaborative office with team projects"},
    {"value": "quiet_focused", "label": "Quiet, focused environment for deep work"},
    {"value": "creative_flexible", "label": "Creative, flexible workspace"},
    {"value": "remote_home", "label": "Working from home/remotely"},
    {"value": "active_outdoors", "label": "Active, outdoors, or hands-on work"},
    {"value": "client_facing", "label": "Meeting and helping people directly"},
]

FINANCIAL_CONSIDERATION_OPTIONS = [
    {"value": "very_important", "label": "Very important - I need financial security"},
    {"value": "moderately_important", "label": "Moderately important - decent income is needed"},
    {"value": "somewhat_important", "label": "Somewhat important - passion over pay"},
    {"value": "not_important", "label": "Not important - I'll follow my passion"},
]

EXPERIENCE_LEVELS = ["Entry Level", "Mid Level", "Senior Level", "Executive"]

SUPPORTED_CURRENCIES = {
    "USD": "US Dollar",
    "EUR": "Euro",
    "GBP": "British Pound",
    "CAD": "Canadian Dollar",
    "AUD": "Australian Dollar",
    "JPY": "Japanese Yen",
    "CNY": "Chinese Yuan",
    "INR": "Indian Rupee",
    "KRW": "South Korean Won",
    "SGD": "Singapore Dollar",
    "CHF": "Swiss Franc",
    "SEK": "Swedish Krona",
    "NOK": "Norwegian Krone",
    "DKK": "Danish Krone",
    "NZD": "New Zealand Dollar",
    "ZAR": "South African Rand",
    "BRL": "Brazilian Real",
    "MXN": "Mexican Peso",
    "AED": "UAE Dirham",
    "SAR": "Saudi Riyal",
}

MENTOR_FIELDS = [
    "Technology & Software",
    "Business & Finance",
    "Healthcare",
    "Education",
    "Engineering",
    "Marketing & Sales",
    "Design & Creative",
    "Legal",
    "Consulting",
    "Non-Profit & Social Impact",
    "Media & Communications",
    "Science & Research",
    "Government & Public Service",
]

JOB_FIELDS = [
    # STEM
    "Software Development", "Data Science", "Engineering", "Cybersecurity",
    "Healthcare Technology", "Biotechnology", "Environmental Science", "Research & Development",
    # Business & Finance
    "Finance & Banking", "Accounting", "Marketing & Digital Marketing", "Business Analysis",
    "Project Management", "Human Resources", "Sales", "Consulting",
    # Healthcare
    "Healthcare", "Nursing", "Physical Therapy", "Mental Health", "Public Health",
    "Medical Technology", "Pharmacy",
    # Education & Social Services
    "Education", "Social Work", "Non-profit", "Government & Public Service",
    # Creative & Media
    "Design & Creative", "Media & Communications", "Entertainment", "Publishing",
    "Advertising & PR",
    # Other
    "Legal Services", "Real Estate", "Hospitality & Tourism", "Retail Management",
    "Manufacturing", "Transportation & Logistics",
]

UNIVERSITY_MAJORS = [
    # STEM
    "Computer Science & Software Engineering", "Electrical Engineering", "Mechanical Engineering",
    "Civil Engineering", "Chemical Engineering", "Biomedical Engineering",
    "Data Science & Analytics", "Cybersecurity", "Mathematics", "Physics", "Chemistry",
    "Biology & Life Sciences", "Environmental Science", "Astronomy & Astrophysics",
    # Business & Economics
    "Business Administration", "Finance & Banking", "Accounting", "Marketing & Digital Marketing",
    "Economics", "International Business", "Entrepreneurship", "Supply Chain Management",
    "Human Resources", "Project Management",
    # Health & Medical Sciences
    "Pre-Medicine", "Nursing", "Pharmacy", "Physical Therapy", "Occupational Therapy",
    "Public Health", "Nutrition & Dietetics", "Medical Technology", "Veterinary Medicine",
    "Dentistry", "Clinical Psychology",
    # Social Sciences & Humanities
    "Psychology", "Sociology", "Political Science", "International Relations", "History",
    "Philosophy", "English Literature", "Foreign Languages", "Anthropology", "Geography",
    "Religious Studies",
    # Arts & Creative Fields
    "Graphic Design", "Fine Arts", "Music", "Theater & Performing Arts", "Film & Media Production",
    "Architecture", "Fashion Design", "Interior Design", "Creative Writing", "Photography",
    # Education & Human Services
    "Elementary Education", "Secondary Education", "Special Education", "Social Work",
    "Criminal Justice", "Pre-Law", "Public Administration", "Non-Profit Management",
    # Communications & Media
    "Journalism", "Communications", "Public Relations", "Broadcasting & Media Studies",
    "Digital Media", "Advertising",
    # Agriculture & Natural Resources
    "Agriculture & Farming", "Forestry", "Marine Biology", "Natural Resource Management",
    "Food Science",
]
